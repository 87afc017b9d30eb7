"""Incoming requests.

A ``Request`` is built once per ASGI HTTP scope. Everything except the
body is known up front and frozen; the body arrives later through the
ASGI ``receive`` callable and is read at most once.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from wayline._internal.asgi import Receive, Scope
from wayline.errors import PayloadTooLarge
from wayline.http.headers import Headers
from wayline.http.query import QueryParams


def _address(value: Any) -> tuple[str, int] | None:
    return (value[0], value[1]) if value else None


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request as the app sees it.

    ``path`` is percent-decoded; ``raw_path`` keeps the bytes the client
    sent when the server provides them. Read the body with ``body()``,
    ``text()`` or ``json()``, or buffer it under a size limit with
    ``collect_body()`` so that synchronous code can see it afterwards
    through ``buffered_body``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    scheme: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    raw_path: bytes = b""
    root_path: str = ""

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    # Set once, after the body has been fully received
    _body: bytes | None = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            scheme=scope.get("scheme", "http"),
            server=_address(scope.get("server")),
            client=_address(scope.get("client")),
            raw_path=scope.get("raw_path") or b"",
            root_path=scope.get("root_path", ""),
            _receive=receive,
        )

    @property
    def url(self) -> str:
        """The request target: the path as sent, then ``?query`` if any.

        Without ``raw_path`` the decoded path is re-quoted.
        """
        target = self.raw_path.decode("latin-1") if self.raw_path else quote(self.path)
        query = self.query.raw.decode("latin-1")
        return f"{target}?{query}" if query else target

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared ``Content-Length``; ``None`` when absent or not a number."""
        try:
            return int(self.headers["content-length"])
        except (KeyError, ValueError):
            return None

    @property
    def body_expected(self) -> bool:
        """Whether the client announced a non-empty body."""
        return "transfer-encoding" in self.headers or (self.content_length or 0) > 0

    @property
    def is_body_buffered(self) -> bool:
        return self._body is not None

    @property
    def buffered_body(self) -> bytes | None:
        """The body once it has been read, else ``None``."""
        return self._body

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield body chunks straight from ``receive``."""
        if self._receive is None:
            return
        more = True
        while more:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more = message.get("more_body", False)

    async def body(self) -> bytes:
        """Read the whole body. Later calls return the same bytes."""
        return await self._read(limit=None)

    async def collect_body(self, *, max_size: int) -> bytes:
        """Read the whole body, refusing more than *max_size* bytes.

        Raises:
            PayloadTooLarge: The declared or the actually received size
                exceeds *max_size*. The body stays unbuffered.
        """
        return await self._read(limit=max_size)

    async def _read(self, *, limit: int | None) -> bytes:
        if self._body is not None:
            return self._body
        if limit is not None and (self.content_length or 0) > limit:
            raise PayloadTooLarge(limit)

        buffer = bytearray()
        async for chunk in self.stream():
            buffer += chunk
            if limit is not None and len(buffer) > limit:
                raise PayloadTooLarge(limit)

        body = bytes(buffer)
        object.__setattr__(self, "_body", body)
        return body

    async def text(self) -> str:
        """The body decoded as UTF-8."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json_module.loads(await self.body())
