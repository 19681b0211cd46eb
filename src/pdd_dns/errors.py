"""
Exceptions raised by the PDD DNS client.

Every failure of a call surfaces as exactly one ``PddError`` subclass:

- ``TransportError``: the HTTP request could not be completed.
- ``BodyReadError``: the response body could not be read.
- ``DecodeError``: the body matched neither the expected reply nor the
  error reply shape.
- ``ApiRejectedError``: the API answered with an error reply.

The underlying exception is always chained (``raise ... from``) and is
available as ``cause``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any

    from pydantic import ValidationError

    from pdd_dns.models import ApiErrorCode, ErrorReply


class PddError(Exception):
    """
    Base class for all client errors.

    Attributes
    ----------
    description : str
        Human-readable description of the failure.
    """

    def __init__(self, description: str) -> None:
        """
        Initialize PddError.

        Parameters
        ----------
        description : str
            Human-readable description of the failure.
        """
        self.description = description
        super().__init__(description)

    @property
    def cause(self) -> BaseException | None:
        """The underlying exception this error was raised from."""
        return self.__cause__


class TransportError(PddError):
    """Network or connection failure while performing the HTTP request."""


class BodyReadError(PddError):
    """Local I/O failure while reading the response body."""


class DecodeError(PddError):
    """
    The response body could not be decoded.

    Attributes
    ----------
    validation_error : ValidationError
        The error from decoding the expected reply shape. The fallback
        error reply decode error is not kept.
    body : str
        The raw response body.
    """

    def __init__(self, validation_error: ValidationError, body: str) -> None:
        """
        Initialize DecodeError.

        Parameters
        ----------
        validation_error : ValidationError
            The error from decoding the expected reply shape.
        body : str
            The raw response body.
        """
        self.validation_error = validation_error
        self.body = body
        super().__init__(
            f"Unexpected reply from the API: {validation_error.error_count()} "
            f"validation error(s) for {validation_error.title}",
        )

    def errors(self) -> list[Any]:
        """Return the structured errors of the underlying ValidationError."""
        return list(self.validation_error.errors())


class ApiRejectedError(PddError):
    """
    The API parsed the request but reported an error.

    Attributes
    ----------
    reply : ErrorReply
        The decoded error reply.
    """

    def __init__(self, reply: ErrorReply) -> None:
        """
        Initialize ApiRejectedError.

        Parameters
        ----------
        reply : ErrorReply
            The decoded error reply.
        """
        self.reply = reply
        super().__init__(reply.description)

    @property
    def code(self) -> ApiErrorCode:
        """The error code reported by the API."""
        return self.reply.error
