"""In-process client for exercising an App over ASGI.

Requests are turned into an ASGI scope and fed straight to the app; the
messages it sends back are reassembled into a ``Response``. No sockets,
no server.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import unquote

from wayline._internal.invoke import invoke
from wayline.app import App
from wayline.http.response import HTML, Response

type HeaderInput = Mapping[str, str] | Iterable[tuple[str, str]]


class TestClient:
    """Drive an App without a server.

    Entering the context freezes the app and runs its startup hooks;
    leaving runs the shutdown hooks::

        async with TestClient(app) as client:
            response = await client.get("/episodes/42/comments?count=10")
            assert response.status == 200

    Paths are raw request targets: percent-encoded, optionally with a
    query string.
    """

    __test__ = False
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *args: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: HeaderInput | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: HeaderInput | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """POST *body*, or *json* serialized with a JSON content type."""
        lines = _header_list(headers)
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            lines = [("content-type", "application/json"), *lines]
        return await self.request("POST", path, headers=lines, body=body)

    async def put(
        self,
        path: str,
        *,
        headers: HeaderInput | None = None,
        body: bytes | None = None,
    ) -> Response:
        return await self.request("PUT", path, headers=headers, body=body)

    async def delete(self, path: str, *, headers: HeaderInput | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: HeaderInput | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send any method. A list of pairs may repeat a header name."""
        payload = body or b""
        scope = _scope(method, path, _header_list(headers), payload)
        delivered = False

        async def receive() -> dict[str, Any]:
            nonlocal delivered
            if delivered:
                return {"type": "http.disconnect"}
            delivered = True
            return {"type": "http.request", "body": payload, "more_body": False}

        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        await self.app(scope, receive, send)
        return _collect(messages)


def _header_list(headers: HeaderInput | None) -> list[tuple[str, str]]:
    if headers is None:
        return []
    if isinstance(headers, Mapping):
        return list(headers.items())
    return list(headers)


def _scope(method: str, target: str, headers: list[tuple[str, str]], body: bytes) -> dict[str, Any]:
    path, _, query = target.partition("?")
    raw = [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]
    if body and all(name != b"content-length" for name, _ in raw):
        raw.append((b"content-length", str(len(body)).encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "scheme": "http",
        "path": unquote(path),
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": raw,
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


def _collect(messages: list[dict[str, Any]]) -> Response:
    """Rebuild a Response from the app's ``http.response.*`` messages."""
    status = 200
    content_type = HTML
    extra: list[tuple[str, str]] = []
    chunks: list[bytes] = []
    for message in messages:
        if message["type"] == "http.response.start":
            status = message["status"]
            for name_b, value_b in message.get("headers", ()):
                name, value = name_b.decode("latin-1"), value_b.decode("latin-1")
                if name == "content-type":
                    content_type = value
                elif name != "content-length":
                    extra.append((name, value))
        elif message["type"] == "http.response.body":
            chunks.append(message.get("body", b""))
    return Response(
        body=b"".join(chunks),
        status=status,
        content_type=content_type,
        headers=tuple(extra),
    )
