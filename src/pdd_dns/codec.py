"""
Value decoding helpers for PDD DNS API payloads.

This module holds the field-level codecs shared by the reply models:
the polymorphic record content (IPv4 / IPv6 / opaque text), the unsigned
integer widths used on the wire, and the ``LenientOptional`` annotation
that turns a decode failure into an absent value.
"""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address
from typing import TYPE_CHECKING, Annotated

from pydantic import (
    Field,
    PlainSerializer,
    PlainValidator,
    ValidationError,
    WrapValidator,
)
from pydantic_core import PydanticCustomError

if TYPE_CHECKING:
    from typing import Any

    from pydantic import ValidatorFunctionWrapHandler


# Wire integers are JSON numbers only; strings and booleans are rejected
UInt16 = Annotated[int, Field(ge=0, le=0xFFFF, strict=True)]
UInt32 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF, strict=True)]
UInt64 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF_FFFF_FFFF, strict=True)]


def parse_content(value: Any) -> IPv4Address | IPv6Address | str:
    """
    Decode a record content string.

    The value is tried as an IPv4 address, then as an IPv6 address, and
    otherwise kept as opaque text (CNAME targets, TXT data, etc.).

    Parameters
    ----------
    value : Any
        The raw JSON value.

    Returns
    -------
    IPv4Address | IPv6Address | str
        The decoded content.

    Raises
    ------
    PydanticCustomError
        If the value is not a string.
    """
    if isinstance(value, (IPv4Address, IPv6Address)):
        return value
    if not isinstance(value, str):
        raise PydanticCustomError(
            "content_type",
            "Record content must be a string, got {input_type}",
            {"input_type": type(value).__name__},
        )

    try:
        return IPv4Address(value)
    except ValueError:
        pass
    try:
        return IPv6Address(value)
    except ValueError:
        return value


def render_content(content: IPv4Address | IPv6Address | str) -> str:
    """Render record content back to its wire string."""
    match content:
        case IPv4Address() | IPv6Address():
            return str(content)
        case _:
            return content


RecordContent = Annotated[
    IPv4Address | IPv6Address | str,
    PlainValidator(parse_content),
    PlainSerializer(render_content, return_type=str),
]


def _absent_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


class LenientOptional:
    """
    Optional field annotation that never fails validation.

    ``LenientOptional[T]`` validates the input as ``T``; if that fails for
    any reason the field resolves to ``None`` instead of raising. Only use
    it on fields the API is known to return in inconsistent shapes, since
    it hides bad data.

    Examples
    --------
    >>> class Item(BaseModel):
    ...     priority: LenientOptional[UInt32] = None
    >>> Item.model_validate({"priority": ""}).priority is None
    True
    """

    def __class_getitem__(cls, item: Any) -> Any:
        return Annotated[item | None, WrapValidator(_absent_on_error)]
