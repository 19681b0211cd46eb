"""
Logging setup for the PDD DNS client.

Log output goes to stderr and, optionally, to a file. Every handler
carries a ``SensitiveFilter`` so the access token never reaches a log
record in clear text: known token shapes (the ``PddToken`` header,
``token=`` pairs) are masked by pattern, and the configured token itself
is masked wherever it appears.
"""

from __future__ import annotations

import logging
import logging.handlers
import re
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Final

    from pdd_dns.config import LoggingConfig


PACKAGE_LOGGER: Final[str] = "pdd_dns"

# Number of leading token characters left readable in masked output
KEEP_CHARS: Final[int] = 6
MASK: Final[str] = "******"

# (pattern, replacement) pairs; group 1 is kept, group 2 is the readable
# prefix of the secret and group 3 the masked remainder
SENSITIVE_PATTERNS: Final[list[tuple[re.Pattern[str], str]]] = [
    # PddToken header: "PddToken: x", "'PddToken': 'x'", '"PddToken": "x"'
    (
        re.compile(
            r"(PddToken['\"]?\s*[:=]\s*['\"]?)([^\s\"',}]{0,6})([^\s\"',}]*)",
            re.IGNORECASE,
        ),
        rf"\1\2{MASK}",
    ),
    # token="x" and token='x'
    (
        re.compile(r'(token=")([^"]{0,6})([^"]*)"', re.IGNORECASE),
        rf'\1\2{MASK}"',
    ),
    (
        re.compile(r"(token=')([^']{0,6})([^']*)'", re.IGNORECASE),
        rf"\1\2{MASK}'",
    ),
    # token=x in query strings, config dumps and argument lists
    (
        re.compile(r"(token=)(?![\"'])([^\s,\"&']{0,6})([^\s,\"&']*)", re.IGNORECASE),
        rf"\1\2{MASK}",
    ),
]

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def mask_token(token: str) -> str:
    """Return the masked form of a token, keeping its first characters."""
    return f"{token[:KEEP_CHARS]}{MASK}"


class SensitiveFilter(logging.Filter):
    """
    Mask access tokens in log records.

    Parameters
    ----------
    secrets : Iterable[str], optional
        Literal secrets to mask wherever they occur, in addition to the
        pattern-based masking.
    """

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self.secrets = tuple(s for s in secrets if s)

    def mask(self, value: str) -> str:
        """Mask all known secrets and token patterns in a string."""
        for secret in self.secrets:
            value = value.replace(secret, mask_token(secret))
        for pattern, replacement in SENSITIVE_PATTERNS:
            value = pattern.sub(replacement, value)
        return value

    def _mask_arg(self, arg: object) -> object:
        return self.mask(arg) if isinstance(arg, str) else arg

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Mask the message and its arguments in place.

        Records are never dropped.
        """
        if record.msg:
            record.msg = self.mask(str(record.msg))

        match record.args:
            case dict() as mapping:
                record.args = {k: self._mask_arg(v) for k, v in mapping.items()}
            case tuple() as args if args:
                record.args = tuple(self._mask_arg(arg) for arg in args)

        return True


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    # stdout is reserved for command output
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.file_enabled:
        log_path = config.file_path_as_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.WatchedFileHandler(str(log_path), encoding="utf-8"),
        )
    return handlers


def setup_logging(config: LoggingConfig, secrets: Iterable[str] = ()) -> None:
    """
    Configure the package logger.

    Calling this again replaces the handlers installed by a previous call.

    Parameters
    ----------
    config : LoggingConfig
        Logging configuration.
    secrets : Iterable[str], optional
        Literal secrets (the access token) to mask in all output.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.level)
    logger.handlers.clear()
    logger.propagate = False

    try:
        handlers = _build_handlers(config)
    except OSError as e:
        # Fall back to console output to report the failure
        logger.addHandler(logging.StreamHandler(sys.stderr))
        logger.critical("Failed to enable file logging: %s", e)
        sys.exit(1)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    sensitive_filter = SensitiveFilter(secrets)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(sensitive_filter)
        logger.addHandler(handler)

    if config.file_enabled:
        logger.debug('File logging enabled: "%s".', config.file_path_as_path)
