"""
Data models for the PDD DNS API.

This module defines the enumerations used on the wire (record types,
result status and API error codes), the DNS record entity returned by
the API and the reply envelopes of the list, add, edit and delete calls.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from pdd_dns.codec import (
    LenientOptional,
    RecordContent,
    UInt16,
    UInt32,
    UInt64,
    render_content,
)

if TYPE_CHECKING:
    from pdd_dns.requests import AddRequest, DeleteRequest, EditRequest


class DnsRecordType(StrEnum):
    """
    DNS record types supported by the API.

    The member value is the canonical wire string, used both when sending
    requests and when decoding replies.
    """

    SRV = "SRV"
    TXT = "TXT"
    NS = "NS"
    MX = "MX"
    SOA = "SOA"
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"


class ResultStatus(StrEnum):
    """
    The ``success`` discriminator present on every reply.

    Attributes
    ----------
    OK : str
        The call succeeded.
    ERROR : str
        The call was rejected; the reply carries an ``error`` code.
    """

    OK = "ok"
    ERROR = "error"


class ApiErrorCode(StrEnum):
    """Error codes reported by the API in the ``error`` field."""

    UNKNOWN = "unknown"
    NO_TOKEN = "no_token"
    NO_DOMAIN = "no_domain"
    NO_CONTENT = "no_content"
    NO_TYPE = "no_type"
    NO_IP = "no_ip"
    BAD_DOMAIN = "bad_domain"
    PROHIBITED = "prohibited"
    BAD_TOKEN = "bad_token"
    BAD_LOGIN = "bad_login"
    BAD_PASSWORD = "bad_password"
    NO_AUTH = "no_auth"
    NOT_ALLOWED = "not_allowed"
    BLOCKED = "blocked"
    OCCUPIED = "occupied"
    DOMAIN_LIMIT_REACHED = "domain_limit_reached"
    NO_REPLY = "no_reply"

    @property
    def description(self) -> str:
        """Human-readable description of the error code."""
        return _ERROR_DESCRIPTIONS[self]


_ERROR_DESCRIPTIONS: dict[ApiErrorCode, str] = {
    ApiErrorCode.UNKNOWN: "unknown error",
    ApiErrorCode.NO_TOKEN: "access token missing",
    ApiErrorCode.NO_DOMAIN: "domain name missing",
    ApiErrorCode.NO_CONTENT: "content missing",
    ApiErrorCode.NO_TYPE: "type missing",
    ApiErrorCode.NO_IP: "IP address missing",
    ApiErrorCode.BAD_DOMAIN: "invalid domain name",
    ApiErrorCode.PROHIBITED: "domain name forbidden",
    ApiErrorCode.BAD_TOKEN: "invalid token",
    ApiErrorCode.BAD_LOGIN: "invalid login",
    ApiErrorCode.BAD_PASSWORD: "invalid password",
    ApiErrorCode.NO_AUTH: "authorization missing",
    ApiErrorCode.NOT_ALLOWED: "access denied",
    ApiErrorCode.BLOCKED: "domain name blocked",
    ApiErrorCode.OCCUPIED: "domain name occupied",
    ApiErrorCode.DOMAIN_LIMIT_REACHED: "max number of domains exceeded",
    ApiErrorCode.NO_REPLY: "server access error",
}


class Record(BaseModel):
    """
    A DNS record as returned by the API.

    SOA and SRV specific fields are only populated for records of those
    types. No cross-field validation is done here; the server is the
    source of truth.

    Attributes
    ----------
    record_id : int
        The record ID assigned by the API.
    record_type : DnsRecordType
        The record type (wire key ``type``).
    domain : str
        The domain the record belongs to.
    subdomain : str
        The host part of the record ("@" for the domain itself).
    fqdn : str
        The fully qualified domain name.
    content : IPv4Address | IPv6Address | str
        The record content, decoded as an address where possible.
    ttl : int
        Time to live in seconds.
    priority : int | None
        MX/SRV priority. Malformed values decode as None.
    refresh, admin_mail, expire, minttl, retry : optional
        SOA fields.
    weight, port : int | None
        SRV fields.
    operation : str | None
        Operation marker returned by the edit call.
    """

    record_id: UInt64
    record_type: DnsRecordType = Field(..., alias="type")
    domain: str
    subdomain: str
    fqdn: str
    content: RecordContent
    ttl: UInt32

    priority: LenientOptional[UInt32] = None

    # SOA
    refresh: UInt32 | None = None
    admin_mail: str | None = None
    expire: UInt32 | None = None
    minttl: UInt32 | None = None
    retry: UInt32 | None = None

    # SRV
    weight: UInt32 | None = None
    port: UInt16 | None = None

    operation: str | None = None

    model_config = {"populate_by_name": True}

    def as_add_request(self) -> AddRequest:
        """
        Build a request that would add a copy of this record.

        The SRV target cannot be read back from the API, so it is always
        left empty.

        Returns
        -------
        AddRequest
            The add request.
        """
        from pdd_dns.requests import AddRequest  # noqa: PLC0415

        return AddRequest(
            domain=self.domain,
            record_type=self.record_type,
            admin_mail=self.admin_mail or "",
            content=render_content(self.content),
            priority=10 if self.priority is None else self.priority,
            weight=self.weight or 0,
            port=self.port or 0,
            target="",
            subdomain=self.subdomain,
            ttl=self.ttl,
        )

    def as_edit_request(self) -> EditRequest:
        """
        Build an edit request mirroring the current record values.

        ``neg_cache`` and ``target`` have no counterpart in the record
        and are left unset.

        Returns
        -------
        EditRequest
            The edit request.
        """
        from pdd_dns.requests import EditRequest  # noqa: PLC0415

        return EditRequest(
            domain=self.domain,
            record_id=self.record_id,
            subdomain=self.subdomain,
            ttl=self.ttl,
            refresh=self.refresh,
            retry=self.retry,
            expire=self.expire,
            admin_mail=self.admin_mail,
            content=render_content(self.content),
            priority=self.priority,
            port=self.port,
            weight=self.weight,
        )

    def as_delete_request(self) -> DeleteRequest:
        """Build a request that deletes this record."""
        from pdd_dns.requests import DeleteRequest  # noqa: PLC0415

        return DeleteRequest(domain=self.domain, record_id=self.record_id)


class ListReply(BaseModel):
    """Reply of the ``list`` call."""

    records: list[Record]
    domain: str
    success: ResultStatus


class AddReply(BaseModel):
    """Reply of the ``add`` call."""

    domain: str
    record: Record
    success: ResultStatus


class EditReply(BaseModel):
    """Reply of the ``edit`` call."""

    domain: str
    record_id: UInt64
    record: Record
    success: ResultStatus


class DeleteReply(BaseModel):
    """Reply of the ``delete`` call."""

    domain: str
    record_id: UInt64
    success: ResultStatus


class ErrorReply(BaseModel):
    """
    Reply returned when the API rejects a call.

    Attributes
    ----------
    domain : str
        The domain from the request.
    record_id : int | None
        The record ID, for calls that target a record.
    success : ResultStatus
        The result status (normally ``ResultStatus.ERROR``).
    error : ApiErrorCode
        The reported error code.
    """

    domain: str
    record_id: UInt64 | None = None
    success: ResultStatus
    error: ApiErrorCode

    @property
    def description(self) -> str:
        """Human-readable description of the reported error."""
        return self.error.description

    def __str__(self) -> str:
        return self.description
