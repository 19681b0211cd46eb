"""
Request models for the PDD DNS API.

Each request knows the HTTP method and endpoint it is sent to, how to
render itself into the ordered form parameters the API expects, and which
reply model its response body decodes into.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, NamedTuple
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pdd_dns.codec import UInt16, UInt32, UInt64
from pdd_dns.errors import ApiRejectedError, DecodeError
from pdd_dns.models import (
    AddReply,
    DeleteReply,
    DnsRecordType,
    EditReply,
    ErrorReply,
    ListReply,
    ResultStatus,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Any, Self


# Default values used by the API when a field is not given
DEFAULT_PRIORITY = 10
DEFAULT_SUBDOMAIN = "@"
DEFAULT_TTL = 21600


class RenderedRequest(NamedTuple):
    """
    A request rendered for the wire.

    Attributes
    ----------
    method : str
        HTTP method.
    endpoint : str
        Endpoint name, relative to the API base URL.
    params : list[tuple[str, str]]
        Ordered form parameters.
    """

    method: str
    endpoint: str
    params: list[tuple[str, str]]

    @property
    def encoded_params(self) -> str:
        """The parameters as an ``application/x-www-form-urlencoded`` string."""
        return encode_params(self.params)


def encode_params(params: Sequence[tuple[str, str]]) -> str:
    """
    Form-urlencode parameters, keeping their order.

    The same encoding is used for query strings and request bodies.

    Parameters
    ----------
    params : Sequence[tuple[str, str]]
        Key/value pairs.

    Returns
    -------
    str
        The encoded string.
    """
    return urlencode(list(params))


def _optional(value: object | None) -> str:
    # Unset fields go out as an empty string.
    return "" if value is None else str(value)


class BaseRequest(BaseModel, ABC):
    """
    Base class for API requests.

    Requests are immutable once constructed. Use ``with_`` to derive a
    modified copy.
    """

    method: ClassVar[str]
    endpoint: ClassVar[str]
    reply_model: ClassVar[type[BaseModel]]

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    domain: str

    @abstractmethod
    def params(self) -> list[tuple[str, str]]:
        """
        Get the ordered form parameters of the request.

        Returns
        -------
        list[tuple[str, str]]
            Key/value pairs, values rendered as strings.
        """
        ...

    def render(self) -> RenderedRequest:
        """Render the request into method, endpoint and parameters."""
        return RenderedRequest(self.method, self.endpoint, self.params())

    def with_(self, **changes: Any) -> Self:
        """
        Return a validated copy of the request with some fields changed.

        Parameters
        ----------
        **changes : Any
            Field values to replace, by field name.

        Returns
        -------
        Self
            The new request.
        """
        return self.model_validate({**self.model_dump(), **changes})

    def parse_reply(self, body: str) -> BaseModel:
        """
        Decode a response body for this request.

        The body is decoded as the expected reply first. If that fails, or
        the decoded reply reports ``success: "error"``, it is decoded as an
        error reply.

        Parameters
        ----------
        body : str
            The raw response body.

        Returns
        -------
        BaseModel
            The decoded reply (an instance of ``reply_model``).

        Raises
        ------
        ApiRejectedError
            If the body is an error reply.
        DecodeError
            If the body matches neither shape. The error carries the
            failure of the expected reply decode, or of the error reply
            decode when the expected reply itself reported an error.
        """
        try:
            reply = self.reply_model.model_validate_json(body)
        except ValidationError as e:
            reply_error = e
        else:
            # Error bodies for record calls can also fit the success shape
            if reply.success is ResultStatus.OK:
                return reply
            reply_error = None

        try:
            error_reply = ErrorReply.model_validate_json(body)
        except ValidationError as e:
            primary = e if reply_error is None else reply_error
            raise DecodeError(primary, body) from primary

        raise ApiRejectedError(error_reply) from None


class ListRequest(BaseRequest):
    """List all records of a domain."""

    method = "GET"
    endpoint = "list"
    reply_model = ListReply

    def params(self) -> list[tuple[str, str]]:
        """Get the form parameters."""
        return [("domain", self.domain)]


class AddRequest(BaseRequest):
    """
    Add a record to a domain.

    All fields are sent. Fields not relevant to the record type are sent
    with their defaults.

    Attributes
    ----------
    domain : str
        The domain name.
    record_type : DnsRecordType
        The record type (wire key ``type``).
    admin_mail : str
        Administrator mail, required for SOA.
    content : str
        IPv4 for A, IPv6 for AAAA, text for CNAME, MX, NS and TXT.
    priority : int
        Required for SRV and MX.
    weight : int
        Required for SRV.
    port : int
        Required for SRV.
    target : str
        Required for SRV.
    subdomain : str
        Host part of the record.
    ttl : int
        Time to live in seconds.
    """

    method = "POST"
    endpoint = "add"
    reply_model = AddReply

    record_type: DnsRecordType = Field(..., alias="type")

    admin_mail: str = ""
    content: str = ""
    priority: UInt32 = DEFAULT_PRIORITY
    weight: UInt32 = 0
    port: UInt16 = 0
    target: str = ""

    subdomain: str = DEFAULT_SUBDOMAIN
    ttl: UInt32 = DEFAULT_TTL

    def params(self) -> list[tuple[str, str]]:
        """Get the form parameters."""
        return [
            ("domain", self.domain),
            ("type", self.record_type.value),
            ("admin_mail", self.admin_mail),
            ("content", self.content),
            ("priority", str(self.priority)),
            ("weight", str(self.weight)),
            ("port", str(self.port)),
            ("target", self.target),
            ("subdomain", self.subdomain),
            ("ttl", str(self.ttl)),
        ]


class EditRequest(BaseRequest):
    """
    Edit an existing record.

    Every field other than ``domain`` and ``record_id`` is optional and
    sent as an empty string when unset. The API cannot tell an unset
    field from one explicitly set to an empty string.

    Attributes
    ----------
    domain : str
        The domain name.
    record_id : int
        The ID of the record to edit.
    subdomain, ttl, refresh, retry, expire, neg_cache, admin_mail,
    content, priority, port, weight, target : optional
        New values. ``refresh``, ``retry``, ``expire``, ``neg_cache`` and
        ``admin_mail`` apply to SOA records, ``port``, ``weight`` and
        ``target`` to SRV records.
    """

    method = "POST"
    endpoint = "edit"
    reply_model = EditReply

    record_id: UInt64

    subdomain: str | None = None
    ttl: UInt32 | None = None
    refresh: UInt32 | None = None
    retry: UInt32 | None = None
    expire: UInt32 | None = None
    neg_cache: UInt32 | None = None
    admin_mail: str | None = None
    content: str | None = None
    priority: UInt32 | None = None
    port: UInt16 | None = None
    weight: UInt32 | None = None
    target: str | None = None

    def params(self) -> list[tuple[str, str]]:
        """Get the form parameters."""
        return [
            ("domain", self.domain),
            ("record_id", str(self.record_id)),
            ("subdomain", _optional(self.subdomain)),
            ("ttl", _optional(self.ttl)),
            ("refresh", _optional(self.refresh)),
            ("retry", _optional(self.retry)),
            ("expire", _optional(self.expire)),
            ("neg_cache", _optional(self.neg_cache)),
            ("admin_mail", _optional(self.admin_mail)),
            ("content", _optional(self.content)),
            ("priority", _optional(self.priority)),
            ("port", _optional(self.port)),
            ("weight", _optional(self.weight)),
            ("target", _optional(self.target)),
        ]


class DeleteRequest(BaseRequest):
    """Delete a record."""

    method = "POST"
    endpoint = "delete"
    reply_model = DeleteReply

    record_id: UInt64

    def params(self) -> list[tuple[str, str]]:
        """Get the form parameters."""
        return [("domain", self.domain), ("record_id", str(self.record_id))]
