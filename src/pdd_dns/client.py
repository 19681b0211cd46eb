"""
HTTP client for the PDD DNS API.

This module sends rendered requests to the API with ``httpx`` and decodes
the response bodies into reply models. Authentication uses the
``PddToken`` header.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

import httpx
from starlette import status as st_status

from pdd_dns.errors import BodyReadError, TransportError
from pdd_dns.requests import (
    DEFAULT_PRIORITY,
    DEFAULT_SUBDOMAIN,
    DEFAULT_TTL,
    AddRequest,
    DeleteRequest,
    EditRequest,
    ListRequest,
)

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Any, Final, Self

    from pydantic import BaseModel

    from pdd_dns.models import (
        AddReply,
        DeleteReply,
        DnsRecordType,
        EditReply,
        ListReply,
    )
    from pdd_dns.requests import BaseRequest


# PDD DNS API base URL
BASE_URL: Final[str] = "https://pddimp.yandex.ru/api2/admin/dns"

# HTTP timeout in seconds
HTTP_TIMEOUT: Final[float] = 30.0

TOKEN_HEADER: Final[str] = "PddToken"
FORM_CONTENT_TYPE: Final[str] = "application/x-www-form-urlencoded"

# Methods whose parameters go in the query string instead of the body
_QUERY_METHODS: Final[frozenset[str]] = frozenset({"GET", "DELETE"})


logger = logging.getLogger(__name__)


class PddClient:
    """
    Synchronous client for the PDD DNS API.

    Each call is a single blocking request/response round trip; nothing is
    retried or cached. An instance serializes its own calls; use separate
    instances for concurrent work.

    Examples
    --------
    >>> with PddClient("token") as client:
    ...     reply = client.list_records("example.com")
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize a PddClient.

        Parameters
        ----------
        token : str
            The PDD access token.
        base_url : str, optional
            The API base URL.
        timeout : float, optional
            HTTP timeout in seconds. Ignored when ``http_client`` is given.
        http_client : httpx.Client | None, optional
            An existing HTTP client to use. It is not closed by this
            client.

        Raises
        ------
        ValueError
            If the token is empty.
        """
        if not token:
            msg = "PDD access token must not be empty"
            raise ValueError(msg)

        self._token = token
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = (
            http_client if http_client is not None else httpx.Client(timeout=timeout)
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_client:
            self._client.close()

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every call."""
        return {
            TOKEN_HEADER: self._token,
            "Content-Type": FORM_CONTENT_TYPE,
        }

    def build_request(self, request: BaseRequest) -> httpx.Request:
        """
        Build the HTTP request for an API request.

        Parameters
        ----------
        request : BaseRequest
            The API request.

        Returns
        -------
        httpx.Request
            The HTTP request, not yet sent.
        """
        rendered = request.render()
        url = f"{self.base_url}/{rendered.endpoint}"
        params = rendered.encoded_params

        if rendered.method in _QUERY_METHODS:
            return self._client.build_request(
                rendered.method,
                f"{url}?{params}",
                headers=self.headers,
            )
        return self._client.build_request(
            rendered.method,
            url,
            headers=self.headers,
            content=params,
        )

    def send(self, request: BaseRequest) -> BaseModel:
        """
        Send a request and decode the reply.

        Parameters
        ----------
        request : BaseRequest
            The API request.

        Returns
        -------
        BaseModel
            The decoded reply, an instance of ``request.reply_model``.

        Raises
        ------
        TransportError
            If the HTTP request fails.
        BodyReadError
            If the response body cannot be read.
        ApiRejectedError
            If the API reports an error.
        DecodeError
            If the body matches neither the reply nor the error shape.
        """
        http_request = self.build_request(request)

        try:
            response = self._client.send(http_request, stream=True)
        except httpx.TransportError as e:
            logger.error(  # noqa: TRY400
                "[pdd] %s %s failed: '%s'", http_request.method, http_request.url, e,
            )
            msg = f"Request to {request.endpoint} failed: {e}"
            raise TransportError(msg) from e

        try:
            response.read()
        except (httpx.StreamError, httpx.TransportError, OSError) as e:
            logger.error(  # noqa: TRY400
                "[pdd] Failed to read %s response: '%s'", request.endpoint, e,
            )
            msg = f"Failed to read {request.endpoint} response: {e}"
            raise BodyReadError(msg) from e
        finally:
            response.close()

        logger.debug(
            "[pdd] %s %s -> %d",
            http_request.method,
            http_request.url,
            response.status_code,
        )
        logger.debug("[pdd] Response: %s", response.text)

        if response.status_code != st_status.HTTP_200_OK:
            logger.warning(
                "[pdd] %s returned HTTP %d", request.endpoint, response.status_code,
            )

        return request.parse_reply(response.text)

    def list_records(self, domain: str) -> ListReply:
        """List the records of a domain."""
        return cast("ListReply", self.send(ListRequest(domain=domain)))

    def add_record(
        self,
        domain: str,
        record_type: DnsRecordType,
        *,
        content: str = "",
        subdomain: str = DEFAULT_SUBDOMAIN,
        ttl: int = DEFAULT_TTL,
        priority: int = DEFAULT_PRIORITY,
        weight: int = 0,
        port: int = 0,
        target: str = "",
        admin_mail: str = "",
    ) -> AddReply:
        """
        Add a record to a domain.

        Parameters
        ----------
        domain : str
            The domain name.
        record_type : DnsRecordType
            The record type.
        content : str, optional
            The record content.
        subdomain : str, optional
            Host part of the record.
        ttl : int, optional
            Time to live in seconds.
        priority, weight, port, target : optional
            MX/SRV fields.
        admin_mail : str, optional
            SOA administrator mail.

        Returns
        -------
        AddReply
            The reply, including the created record.
        """
        request = AddRequest(
            domain=domain,
            record_type=record_type,
            content=content,
            subdomain=subdomain,
            ttl=ttl,
            priority=priority,
            weight=weight,
            port=port,
            target=target,
            admin_mail=admin_mail,
        )
        return cast("AddReply", self.send(request))

    def edit_record(self, domain: str, record_id: int, **changes: Any) -> EditReply:
        """
        Edit a record.

        Parameters
        ----------
        domain : str
            The domain name.
        record_id : int
            The ID of the record to edit.
        **changes : Any
            Fields to set, as accepted by ``EditRequest``.

        Returns
        -------
        EditReply
            The reply, including the updated record.
        """
        request = EditRequest(domain=domain, record_id=record_id, **changes)
        return cast("EditReply", self.send(request))

    def delete_record(self, domain: str, record_id: int) -> DeleteReply:
        """Delete a record."""
        request = DeleteRequest(domain=domain, record_id=record_id)
        return cast("DeleteReply", self.send(request))
