"""Tests for value codecs."""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address

import pytest
from pydantic import BaseModel, ValidationError

from pdd_dns.codec import (
    LenientOptional,
    RecordContent,
    UInt16,
    UInt32,
    parse_content,
    render_content,
)


class ContentModel(BaseModel):
    content: RecordContent


class PriorityModel(BaseModel):
    priority: LenientOptional[UInt32] = None


class PortModel(BaseModel):
    port: LenientOptional[UInt16] = None


class TestParseContent:
    """Tests for parse_content function."""

    @pytest.mark.parametrize("value", ["1.2.3.4", "127.0.0.1", "255.255.255.255"])
    def test_ipv4(self, value: str) -> None:
        content = parse_content(value)
        assert isinstance(content, IPv4Address)
        assert str(content) == value

    @pytest.mark.parametrize("value", ["2001:db8::1", "::1", "fe80::1:2"])
    def test_ipv6(self, value: str) -> None:
        content = parse_content(value)
        assert isinstance(content, IPv6Address)
        assert str(content) == value

    @pytest.mark.parametrize(
        "value",
        [
            "mail.example.com",
            "v=spf1 include:_spf.yandex.net ~all",
            "",
            "1.2.3",
            "1.2.3.4.5",
            "256.1.1.1",
            "2001:db8::g",
        ],
    )
    def test_opaque_string(self, value: str) -> None:
        content = parse_content(value)
        assert type(content) is str
        assert content == value

    def test_non_string_rejected(self):
        with pytest.raises(ValidationError):
            ContentModel.model_validate({"content": 16909060})


class TestRenderContent:
    """Tests for render_content function."""

    def test_render_addresses(self):
        assert render_content(IPv4Address("1.2.3.4")) == "1.2.3.4"
        assert render_content(IPv6Address("2001:db8::1")) == "2001:db8::1"

    def test_render_text(self):
        assert render_content("mx.yandex.net") == "mx.yandex.net"


class TestRecordContent:
    """Tests for the RecordContent annotation."""

    def test_decode_from_json(self):
        assert ContentModel.model_validate_json(
            '{"content": "1.2.3.4"}',
        ).content == IPv4Address("1.2.3.4")
        assert ContentModel.model_validate_json(
            '{"content": "2001:db8::1"}',
        ).content == IPv6Address("2001:db8::1")
        assert (
            ContentModel.model_validate_json('{"content": "example.com"}').content
            == "example.com"
        )

    def test_serializes_as_string(self):
        model = ContentModel.model_validate({"content": "1.2.3.4"})
        assert model.model_dump() == {"content": "1.2.3.4"}
        assert model.model_dump_json() == '{"content":"1.2.3.4"}'


class TestLenientOptional:
    """Tests for the LenientOptional annotation."""

    def test_valid_integer(self):
        assert PriorityModel.model_validate_json('{"priority": 10}').priority == 10

    def test_null(self):
        assert PriorityModel.model_validate_json('{"priority": null}').priority is None

    def test_missing(self):
        assert PriorityModel.model_validate_json("{}").priority is None

    @pytest.mark.parametrize(
        "raw",
        [
            '""',
            '"abc"',
            "-1",
            "4294967296",
            "1.5",
            "10.0",
            '"10"',
            "true",
            "false",
            "[10]",
            '{"value": 10}',
        ],
    )
    def test_invalid_values_become_none(self, raw: str) -> None:
        model = PriorityModel.model_validate_json(f'{{"priority": {raw}}}')
        assert model.priority is None

    def test_applies_inner_constraints(self):
        assert PortModel.model_validate({"port": 65535}).port == 65535
        assert PortModel.model_validate({"port": 65536}).port is None


class WidthModel(BaseModel):
    ttl: UInt32


class TestIntegerWidths:
    """Tests for the unsigned integer aliases."""

    def test_accepts_json_integer(self):
        assert WidthModel.model_validate_json('{"ttl": 3600}').ttl == 3600

    @pytest.mark.parametrize("raw", ['"3600"', "true", "3600.0", "-1", "4294967296"])
    def test_rejects_non_integer_input(self, raw: str) -> None:
        with pytest.raises(ValidationError):
            WidthModel.model_validate_json(f'{{"ttl": {raw}}}')

    def test_rejects_bool_from_python(self):
        with pytest.raises(ValidationError):
            WidthModel.model_validate({"ttl": True})
