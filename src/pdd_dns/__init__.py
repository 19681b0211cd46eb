"""
PDD DNS - A typed client for the Yandex PDD DNS administration API.

This package provides request and reply models for listing, adding,
editing and deleting the DNS records of a domain, and a synchronous
HTTP client that sends them.
"""

from pdd_dns.client import PddClient
from pdd_dns.errors import (
    ApiRejectedError,
    BodyReadError,
    DecodeError,
    PddError,
    TransportError,
)
from pdd_dns.models import (
    AddReply,
    ApiErrorCode,
    DeleteReply,
    DnsRecordType,
    EditReply,
    ErrorReply,
    ListReply,
    Record,
    ResultStatus,
)
from pdd_dns.requests import AddRequest, DeleteRequest, EditRequest, ListRequest

__version__ = "0.1.0"
__author__ = "PDD DNS Contributors"

__all__ = [
    "AddReply",
    "AddRequest",
    "ApiErrorCode",
    "ApiRejectedError",
    "BodyReadError",
    "DecodeError",
    "DeleteReply",
    "DeleteRequest",
    "DnsRecordType",
    "EditReply",
    "EditRequest",
    "ErrorReply",
    "ListReply",
    "ListRequest",
    "PddClient",
    "PddError",
    "Record",
    "ResultStatus",
    "TransportError",
]
