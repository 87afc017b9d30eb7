"""Tests for wayline.server.negotiation: return value dispatch."""

import json
from dataclasses import dataclass

import pytest

from wayline.http.response import Redirect, Response
from wayline.server.negotiation import negotiate


@dataclass(frozen=True)
class Track:
    title: str
    seconds: int


class TestNegotiatePassthrough:
    def test_response_passthrough(self) -> None:
        original = Response(body="hello", status=201)
        assert negotiate(original) is original

    def test_redirect(self) -> None:
        result = negotiate(Redirect("/login"))
        assert result.status == 302
        assert ("Location", "/login") in result.headers

    def test_redirect_301_with_headers(self) -> None:
        result = negotiate(Redirect("/new", status=301, headers=(("X-Moved", "yes"),)))
        assert result.status == 301
        assert ("X-Moved", "yes") in result.headers


class TestNegotiatePlainValues:
    def test_none_is_no_content(self) -> None:
        result = negotiate(None)
        assert result.status == 204
        assert result.body == ""

    def test_str_is_html(self) -> None:
        result = negotiate("<p>hi</p>")
        assert result.status == 200
        assert result.content_type == "text/html; charset=utf-8"

    def test_bytes(self) -> None:
        result = negotiate(b"\x00")
        assert result.content_type == "application/octet-stream"

    @pytest.mark.parametrize("value", [{"a": 1}, [1, 2]])
    def test_json(self, value: object) -> None:
        result = negotiate(value)
        assert result.content_type == "application/json; charset=utf-8"
        assert json.loads(result.text) == value

    def test_dataclass(self) -> None:
        result = negotiate(Track("Intro", 42))
        assert json.loads(result.text) == {"title": "Intro", "seconds": 42}


class TestNegotiateTuples:
    def test_status_override(self) -> None:
        result = negotiate(("created", 201))
        assert result.status == 201
        assert result.text == "created"

    def test_status_and_headers(self) -> None:
        result = negotiate(({"ok": True}, 202, {"X-Job": "7"}))
        assert result.status == 202
        assert ("X-Job", "7") in result.headers


class TestNegotiateErrors:
    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError, match="Cannot convert int"):
            negotiate(42)

    def test_dataclass_type_is_not_a_value(self) -> None:
        with pytest.raises(TypeError):
            negotiate(Track)
