"""
Configuration management for the PDD DNS client.

This module handles loading and validating configuration from TOML files,
the environment and command-line arguments. Configuration priority
(high to low):
1. Command-line arguments
2. Configuration file
3. ``PDD_TOKEN`` environment variable (token only)
4. Default values
"""

from __future__ import annotations

import argparse
import copy
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from pdd_dns.client import BASE_URL, HTTP_TIMEOUT
from pdd_dns.models import DnsRecordType

if TYPE_CHECKING:
    from typing import Any


TOKEN_ENV_VAR = "PDD_TOKEN"
DEFAULT_CONFIG_PATH = Path("config.toml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidationError(Exception):
    """
    Exception raised when configuration loading or validation fails.

    Attributes
    ----------
    message : str
        Human-readable error message describing the validation failures.
    config_path : Path | None
        Path to the configuration file that failed validation.
    """

    def __init__(self, message: str, config_path: Path | None = None) -> None:
        """
        Initialize ConfigValidationError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        config_path : Path | None, optional
            Path to the configuration file.
        """
        self.config_path = config_path
        super().__init__(message)


# Configuration models (Pydantic with type validation and coercion)


class ApiConfig(BaseModel):
    """
    API access configuration.

    Attributes
    ----------
    token : str | None
        The PDD access token.
    base_url : str
        The API base URL.
    timeout : float
        HTTP timeout in seconds.
    """

    token: str | None = None
    base_url: str = BASE_URL
    timeout: float = HTTP_TIMEOUT

    @field_validator("timeout")
    @classmethod
    def check_timeout_positive(cls, value: float) -> float:
        """
        Validate that the timeout is positive.

        Raises
        ------
        PydanticCustomError
            If the timeout is zero or negative.
        """
        if value <= 0:
            err_type = "timeout_error"
            raise PydanticCustomError(err_type, "Timeout must be greater than 0")
        return value


class LoggingConfig(BaseModel):
    """
    Logging configuration.

    Attributes
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    file_enabled : bool
        Whether to log to file.
    file_path : str
        Path to the log file.
    """

    level: str = "WARNING"
    file_enabled: bool = False
    file_path: str = "~/.local/state/pdd-dns/pdd-dns.log"

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """
        Validate the log level and normalize it to upper case.

        Raises
        ------
        PydanticCustomError
            If the level is not a standard level name.
        """
        level = value.upper()
        if level not in LOG_LEVELS:
            err_type = "log_level_error"
            raise PydanticCustomError(
                err_type,
                "Log level must be one of {levels}",
                {"levels": ", ".join(LOG_LEVELS)},
            )
        return level

    @property
    def file_path_as_path(self) -> Path:
        """
        Get the log file path as a Path object.

        Returns
        -------
        Path
            The log file path, with ``~`` expanded.
        """
        return Path(self.file_path).expanduser()


class Config(BaseModel):
    """
    Application configuration.

    Attributes
    ----------
    api : ApiConfig
        API access configuration.
    logging : LoggingConfig
        Logging configuration.
    """

    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()


def _format_validation_errors(
    error: ValidationError,
    config_path: Path | None,
) -> str:
    """
    Format Pydantic validation errors into human-readable messages.

    Parameters
    ----------
    error : ValidationError
        Pydantic validation error.
    config_path : Path | None
        Path to the configuration file.

    Returns
    -------
    str
        Human-readable error message.
    """
    lines: list[str] = []

    if config_path:
        lines.append(f'Configuration error in "{config_path}":')
    else:
        lines.append("Configuration error:")

    for err in error.errors():
        # Build field path (e.g., "api.timeout")
        field_path = ".".join(str(loc) for loc in err["loc"])

        error_type = err["type"]
        error_input = err["input"]
        input_type = type(error_input).__name__

        value_repr = (
            f'"{error_input}"' if isinstance(error_input, str) else repr(error_input)
        )

        if error_type in {"timeout_error", "log_level_error"}:
            lines.append(f"  [{field_path}]: {err['msg']} (value: {value_repr}).")
        else:
            expected_type = _get_expected_type(error_type)
            lines.append(
                f"  [{field_path}]: Expected {expected_type}, got {input_type} (value: {value_repr}). {err['msg']}.",
            )

    return "\n".join(lines)


def _get_expected_type(error_type: str) -> str:
    """
    Get human-readable expected type from Pydantic error type.

    Parameters
    ----------
    error_type : str
        Pydantic error type string.

    Returns
    -------
    str
        Human-readable type name.
    """
    type_mapping = {
        "float_type": "float",
        "float_parsing": "float",
        "bool_type": "bool",
        "bool_parsing": "bool",
        "string_type": "str",
        "model_type": "table",
    }
    return type_mapping.get(error_type, error_type)


def load_config_from_file(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a TOML file.

    Parameters
    ----------
    config_path : Path
        Path to the configuration file.

    Returns
    -------
    dict[str, Any]
        Parsed configuration dictionary.

    Raises
    ------
    OSError
        If the configuration file cannot be opened or read.
    tomllib.TOMLDecodeError
        If the configuration file is not valid TOML.
    """
    with config_path.open("rb") as f:
        return tomllib.load(f)


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two configuration dictionaries.

    Parameters
    ----------
    base : dict[str, Any]
        Base configuration.
    override : dict[str, Any]
        Override configuration (takes precedence).

    Returns
    -------
    dict[str, Any]
        Merged configuration.
    """
    # Use deep copy to avoid modifying the original base configuration
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def dict_to_config(
    data: dict[str, Any],
    config_path: Path | None = None,
) -> Config:
    """
    Validate a configuration dictionary and convert it to a Config object.

    Parameters
    ----------
    data : dict[str, Any]
        Configuration dictionary.
    config_path : Path | None, optional
        Path to the configuration file (for error messages).

    Returns
    -------
    Config
        Configuration object.

    Raises
    ------
    ConfigValidationError
        If validation fails.
    """
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        msg = _format_validation_errors(e, config_path)
        raise ConfigValidationError(msg, config_path) from e


def require_token(config: Config) -> str:
    """
    Get the access token, failing if none was configured.

    Raises
    ------
    ConfigValidationError
        If no token is set in any configuration source.
    """
    if not config.api.token:
        msg = (
            "No PDD access token configured. Use --token, the [api] token "
            f"setting or the {TOKEN_ENV_VAR} environment variable."
        )
        raise ConfigValidationError(msg)
    return config.api.token


def _add_record_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the record field options shared by the add and edit commands."""
    parser.add_argument("--subdomain", default=None, help="Host part of the record")
    parser.add_argument("--content", default=None, help="Record content")
    parser.add_argument("--ttl", type=int, default=None, help="TTL in seconds")
    parser.add_argument(
        "--priority", type=int, default=None, help="Priority (MX, SRV)",
    )
    parser.add_argument("--weight", type=int, default=None, help="Weight (SRV)")
    parser.add_argument("--port", type=int, default=None, help="Port (SRV)")
    parser.add_argument("--target", default=None, help="Target (SRV)")
    parser.add_argument(
        "--admin-mail",
        dest="admin_mail",
        default=None,
        help="Administrator mail (SOA)",
    )


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="pdd-dns",
        description="Manage DNS records through the Yandex PDD API",
    )

    # Config arguments
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.toml)",
    )

    # API arguments
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help=f"PDD access token (default: ${TOKEN_ENV_VAR})",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        dest="base_url",
        default=None,
        help="API base URL",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds",
    )

    # Logging arguments
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level",
    )
    log_file_group = parser.add_mutually_exclusive_group()
    log_file_group.add_argument(
        "--log-file-enabled",
        action="store_true",
        dest="log_file_enabled",
        default=None,
        help="Enable logging to file",
    )
    log_file_group.add_argument(
        "--log-file-disabled",
        action="store_false",
        dest="log_file_enabled",
        default=None,
        help="Disable logging to file",
    )
    parser.add_argument(
        "--log-file-path",
        type=Path,
        dest="log_file_path",
        default=None,
        help="Path to the log file",
    )

    # Commands
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List the records of a domain")
    list_parser.add_argument("domain", help="Domain name")

    add_parser = subparsers.add_parser("add", help="Add a record")
    add_parser.add_argument("domain", help="Domain name")
    add_parser.add_argument(
        "record_type",
        type=str.upper,
        choices=[t.value for t in DnsRecordType],
        help="Record type",
    )
    _add_record_arguments(add_parser)

    edit_parser = subparsers.add_parser("edit", help="Edit a record")
    edit_parser.add_argument("domain", help="Domain name")
    edit_parser.add_argument("record_id", type=int, help="Record ID")
    _add_record_arguments(edit_parser)
    edit_parser.add_argument("--refresh", type=int, default=None, help="Refresh (SOA)")
    edit_parser.add_argument("--retry", type=int, default=None, help="Retry (SOA)")
    edit_parser.add_argument("--expire", type=int, default=None, help="Expire (SOA)")
    edit_parser.add_argument(
        "--neg-cache",
        type=int,
        dest="neg_cache",
        default=None,
        help="Negative cache TTL (SOA)",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a record")
    delete_parser.add_argument("domain", help="Domain name")
    delete_parser.add_argument("record_id", type=int, help="Record ID")

    return parser.parse_args(args)


def load_config(
    args: argparse.Namespace | None = None,
    environ: dict[str, str] | None = None,
) -> Config:
    """
    Load configuration from file, environment and command-line arguments.

    Priority (high to low):
    1. Command-line arguments
    2. Configuration file
    3. Environment
    4. Default values

    Parameters
    ----------
    args : argparse.Namespace | None, optional
        Parsed command-line arguments.
    environ : dict[str, str] | None, optional
        Environment variables. If None, uses os.environ.

    Returns
    -------
    Config
        Loaded configuration.

    Raises
    ------
    ConfigValidationError
        If the configuration file is missing or invalid, or a value fails
        validation.
    """
    if args is None:
        args = parse_args()
    if environ is None:
        environ = dict(os.environ)

    config_dict: dict[str, Any] = {}

    # Environment
    if environ.get(TOKEN_ENV_VAR):
        config_dict = {"api": {"token": environ[TOKEN_ENV_VAR]}}

    # Load from config file if specified or if default exists
    config_path = args.config
    if config_path is not None:
        config_path = config_path.expanduser()
    elif DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    if config_path is not None:
        if not config_path.exists():
            msg = f'Configuration file not found: "{config_path}".'
            raise ConfigValidationError(msg, config_path)
        try:
            file_dict = load_config_from_file(config_path)
        except tomllib.TOMLDecodeError as e:
            msg = f'Failed to parse configuration file "{config_path}": {e}.'
            raise ConfigValidationError(msg, config_path) from e
        except OSError as e:
            msg = f'Failed to read configuration file "{config_path}": {e}.'
            raise ConfigValidationError(msg, config_path) from e
        config_dict = merge_config(config_dict, file_dict)

    # Apply command-line overrides
    cli_overrides: dict[str, Any] = {}

    # API overrides
    if args.token is not None:
        cli_overrides.setdefault("api", {})["token"] = args.token
    if args.base_url is not None:
        cli_overrides.setdefault("api", {})["base_url"] = args.base_url
    if args.timeout is not None:
        cli_overrides.setdefault("api", {})["timeout"] = args.timeout

    # Logging overrides
    if args.log_level is not None:
        cli_overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_file_enabled is not None:
        cli_overrides.setdefault("logging", {})["file_enabled"] = args.log_file_enabled
    if args.log_file_path is not None:
        cli_overrides.setdefault("logging", {})["file_path"] = str(args.log_file_path)

    if cli_overrides:
        config_dict = merge_config(config_dict, cli_overrides)

    return dict_to_config(config_dict, config_path)
