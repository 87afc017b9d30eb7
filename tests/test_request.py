"""Tests for wayline.http.request: frozen Request with async body access."""

import pytest

from wayline.errors import PayloadTooLarge
from wayline.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        scope = _make_scope(method="POST", path="/users")
        req = Request.from_asgi(scope, _make_receive())

        assert req.method == "POST"
        assert req.path == "/users"
        assert req.http_version == "1.1"
        assert req.scheme == "http"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)

    def test_missing_raw_path(self) -> None:
        scope = _make_scope(path="/a b")
        del scope["raw_path"]
        req = Request.from_asgi(scope, _make_receive())

        assert req.raw_path == b""
        assert req.url == "/a%20b"

    def test_url_keeps_raw_target(self) -> None:
        scope = _make_scope(path="/a b", raw_path=b"/a%20b", query_string=b"q=1+2")
        req = Request.from_asgi(scope, _make_receive())

        assert req.url == "/a%20b?q=1+2"

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            req.method = "POST"  # type: ignore[misc]


class TestRequestHeaders:
    def test_content_length(self) -> None:
        scope = _make_scope(headers=[(b"content-length", b"12")])
        assert Request.from_asgi(scope, _make_receive()).content_length == 12

    def test_invalid_content_length(self) -> None:
        scope = _make_scope(headers=[(b"content-length", b"many")])
        assert Request.from_asgi(scope, _make_receive()).content_length is None

    def test_body_expected(self) -> None:
        with_length = _make_scope(headers=[(b"content-length", b"3")])
        chunked = _make_scope(headers=[(b"transfer-encoding", b"chunked")])
        empty = _make_scope(headers=[(b"content-length", b"0")])

        assert Request.from_asgi(with_length, _make_receive()).body_expected is True
        assert Request.from_asgi(chunked, _make_receive()).body_expected is True
        assert Request.from_asgi(empty, _make_receive()).body_expected is False
        assert Request.from_asgi(_make_scope(), _make_receive()).body_expected is False


class TestRequestBody:
    async def test_body_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hel", b"lo"))

        assert await req.body() == b"hello"
        assert await req.body() == b"hello"
        assert req.is_body_buffered is True
        assert req.buffered_body == b"hello"

    async def test_json(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b'{"a": 1}'))
        assert await req.json() == {"a": 1}

    async def test_text(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive("é".encode()))
        assert await req.text() == "é"


class TestCollectBody:
    async def test_within_limit(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"abc", b"def"))

        assert req.is_body_buffered is False
        assert req.buffered_body is None
        assert await req.collect_body(max_size=6) == b"abcdef"
        assert req.buffered_body == b"abcdef"

    async def test_declared_length_too_large(self) -> None:
        scope = _make_scope(headers=[(b"content-length", b"100")])
        req = Request.from_asgi(scope, _make_receive(b"x"))

        with pytest.raises(PayloadTooLarge):
            await req.collect_body(max_size=10)
        assert req.is_body_buffered is False

    async def test_streamed_length_too_large(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"abc", b"def"))

        with pytest.raises(PayloadTooLarge):
            await req.collect_body(max_size=4)
        assert req.buffered_body is None
