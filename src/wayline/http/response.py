"""Outgoing responses.

``Response`` is a frozen value. Handlers return one (or something
``negotiate`` turns into one) and middleware derives modified copies
through the ``with_*`` methods.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

HTML = "text/html; charset=utf-8"
PLAIN = "text/plain; charset=utf-8"
JSON = "application/json; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and a body.

    ``body`` may be ``str`` (sent UTF-8 encoded) or ``bytes``.
    ``headers`` keeps insertion order and allows repeated names.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def plain(cls, text: str, *, status: int = 200) -> Response:
        """A ``text/plain`` response."""
        return cls(body=text, status=status, content_type=PLAIN)

    @classmethod
    def json(cls, data: Any, *, status: int = 200) -> Response:
        """Serialize *data* into an ``application/json`` response."""
        return cls(body=json.dumps(data, default=str), status=status, content_type=JSON)

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Copy with one more header line appended."""
        return replace(self, headers=self.headers + ((name, value),))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Copy with every item of *headers* appended as a header line."""
        return replace(self, headers=self.headers + tuple(headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    @property
    def body_bytes(self) -> bytes:
        body = self.body
        return body.encode("utf-8") if isinstance(body, str) else body

    @property
    def text(self) -> str:
        body = self.body
        return body.decode("utf-8") if isinstance(body, bytes) else body

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name*, matched without regard to case."""
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), default)


@dataclass(frozen=True, slots=True)
class Redirect:
    """Return from a handler to send the client to *url* (302 by default)."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
