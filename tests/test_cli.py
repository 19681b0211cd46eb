"""Tests for the command-line entry point."""

from __future__ import annotations

import json
import logging
from urllib.parse import parse_qsl

import httpx
import pytest

from pdd_dns import cli
from pdd_dns.client import PddClient
from pdd_dns.config import parse_args
from pdd_dns.models import DnsRecordType
from pdd_dns.requests import AddRequest, DeleteRequest, EditRequest, ListRequest

RECORD = {
    "record_id": 42,
    "type": "A",
    "domain": "example.com",
    "subdomain": "www",
    "fqdn": "www.example.com",
    "content": "1.2.3.4",
    "ttl": 3600,
    "priority": "",
}


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run in an empty directory without a token in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PDD_TOKEN", raising=False)

    logger = logging.getLogger("pdd_dns")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def stub_api(monkeypatch):
    """Replace the API with a stub transport returning the given payload."""
    captured: list[httpx.Request] = []

    def install(status_code: int = 200, payload: dict | None = None, error=None):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, json=payload)

        def make_client(token, *, base_url, timeout):
            http_client = httpx.Client(transport=httpx.MockTransport(handler))
            return PddClient(token, base_url=base_url, http_client=http_client)

        monkeypatch.setattr(cli, "PddClient", make_client)
        return captured

    return install


class TestBuildRequest:
    """Tests for build_request function."""

    def test_list(self):
        request = cli.build_request(parse_args(["list", "example.com"]))
        assert request == ListRequest(domain="example.com")

    def test_add_uses_request_defaults(self):
        request = cli.build_request(
            parse_args(["add", "example.com", "a", "--content", "1.2.3.4"]),
        )
        assert isinstance(request, AddRequest)
        assert request.record_type == DnsRecordType.A
        assert request.content == "1.2.3.4"
        assert request.subdomain == "@"
        assert request.ttl == 21600
        assert request.priority == 10

    def test_add_srv(self):
        request = cli.build_request(
            parse_args(
                [
                    "add",
                    "example.com",
                    "SRV",
                    "--subdomain",
                    "_sip._tcp",
                    "--priority",
                    "20",
                    "--weight",
                    "5",
                    "--port",
                    "5060",
                    "--target",
                    "sip.example.com",
                ],
            ),
        )
        assert isinstance(request, AddRequest)
        assert request.port == 5060
        assert request.weight == 5
        assert request.target == "sip.example.com"

    def test_edit_only_given_fields(self):
        request = cli.build_request(
            parse_args(["edit", "example.com", "42", "--ttl", "900", "--retry", "90"]),
        )
        assert request == EditRequest(
            domain="example.com",
            record_id=42,
            ttl=900,
            retry=90,
        )

    def test_delete(self):
        request = cli.build_request(parse_args(["delete", "example.com", "42"]))
        assert request == DeleteRequest(domain="example.com", record_id=42)


class TestMain:
    """Tests for the main entry point."""

    def test_list(self, stub_api, capsys):
        captured = stub_api(
            payload={"records": [RECORD], "domain": "example.com", "success": "ok"},
        )
        cli.main(["--token", "abcdef123456", "list", "example.com"])

        output = json.loads(capsys.readouterr().out)
        assert output["success"] == "ok"
        assert output["records"][0]["type"] == "A"
        assert output["records"][0]["content"] == "1.2.3.4"
        assert captured[0].headers["PddToken"] == "abcdef123456"
        assert captured[0].url.params["domain"] == "example.com"

    def test_add(self, stub_api, capsys, monkeypatch):
        monkeypatch.setenv("PDD_TOKEN", "env-token")
        captured = stub_api(
            payload={"domain": "example.com", "record": RECORD, "success": "ok"},
        )
        cli.main(["add", "example.com", "A", "--subdomain", "www", "--content", "1.2.3.4"])

        output = json.loads(capsys.readouterr().out)
        assert output["record"]["record_id"] == 42
        assert captured[0].headers["PddToken"] == "env-token"
        params = dict(parse_qsl(captured[0].content.decode(), keep_blank_values=True))
        assert params["subdomain"] == "www"
        assert params["content"] == "1.2.3.4"

    def test_api_error_exits(self, stub_api, capsys):
        stub_api(
            payload={"domain": "example.com", "success": "error", "error": "bad_token"},
        )
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--token", "abc", "list", "example.com"])
        assert exc_info.value.code == 1
        assert "invalid token" in capsys.readouterr().err

    def test_transport_error_exits(self, stub_api, capsys):
        stub_api(error=httpx.ConnectError("connection refused"))
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--token", "abc", "delete", "example.com", "42"])
        assert exc_info.value.code == 1
        assert "connection refused" in capsys.readouterr().err

    def test_missing_token_exits(self, stub_api, capsys):
        captured = stub_api(payload={})
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["list", "example.com"])
        assert exc_info.value.code == 1
        assert "PDD_TOKEN" in capsys.readouterr().err
        assert captured == []

    def test_unreadable_config_exits(self, stub_api, capsys, tmp_path):
        captured = stub_api(payload={})
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--config", str(tmp_path), "--token", "abc", "list", "example.com"])
        assert exc_info.value.code == 1
        assert "Failed to read" in capsys.readouterr().err
        assert captured == []

    def test_invalid_argument_value_exits(self, stub_api, capsys):
        captured = stub_api(payload={})
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--token", "abc", "add", "example.com", "SRV", "--port", "70000"])
        assert exc_info.value.code == 1
        assert "Invalid arguments" in capsys.readouterr().err
        assert captured == []
