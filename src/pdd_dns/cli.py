"""
CLI entry point for the PDD DNS client.

This module provides the ``pdd-dns`` command: it loads configuration,
sends one request to the API and prints the reply as JSON.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pdd_dns.client import PddClient
from pdd_dns.config import (
    ConfigValidationError,
    load_config,
    parse_args,
    require_token,
)
from pdd_dns.errors import PddError
from pdd_dns.logging_config import setup_logging
from pdd_dns.models import DnsRecordType
from pdd_dns.requests import (
    AddRequest,
    DeleteRequest,
    EditRequest,
    ListRequest,
)

if TYPE_CHECKING:
    import argparse

    from pdd_dns.requests import BaseRequest


logger = logging.getLogger(__name__)

# Record fields settable from the add and edit commands
_RECORD_FIELDS = (
    "subdomain",
    "content",
    "ttl",
    "priority",
    "weight",
    "port",
    "target",
    "admin_mail",
)
_SOA_FIELDS = ("refresh", "retry", "expire", "neg_cache")


def build_request(args: argparse.Namespace) -> BaseRequest:
    """
    Build the API request for the parsed command.

    Options that were not given are left to the request defaults.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments.

    Returns
    -------
    BaseRequest
        The request to send.
    """
    if args.command == "list":
        return ListRequest(domain=args.domain)

    if args.command == "delete":
        return DeleteRequest(domain=args.domain, record_id=args.record_id)

    fields = {
        name: getattr(args, name)
        for name in _RECORD_FIELDS
        if getattr(args, name) is not None
    }

    if args.command == "add":
        return AddRequest(
            domain=args.domain,
            record_type=DnsRecordType(args.record_type),
            **fields,
        )

    fields.update(
        {
            name: getattr(args, name)
            for name in _SOA_FIELDS
            if getattr(args, name) is not None
        },
    )
    return EditRequest(domain=args.domain, record_id=args.record_id, **fields)


def main(argv: list[str] | None = None) -> None:
    """
    Run the PDD DNS command line.

    Parse command-line arguments, load configuration, send the request
    and print the reply. Exit with status 1 on any error.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.
    """
    args = parse_args(argv)
    try:
        config = load_config(args)
        token = require_token(config)
    except ConfigValidationError as e:
        print(e, file=sys.stderr)  # noqa: T201
        sys.exit(1)

    setup_logging(config.logging, secrets=(token,))

    try:
        request = build_request(args)
    except ValidationError as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    logger.info("Sending %s request for %s.", request.endpoint, request.domain)

    with PddClient(
        token,
        base_url=config.api.base_url,
        timeout=config.api.timeout,
    ) as client:
        try:
            reply = client.send(request)
        except PddError as e:
            logger.debug("Request failed.", exc_info=e)
            print(f"Error: {e.description}", file=sys.stderr)  # noqa: T201
            sys.exit(1)

    print(reply.model_dump_json(indent=2, by_alias=True))  # noqa: T201


if __name__ == "__main__":
    main()
