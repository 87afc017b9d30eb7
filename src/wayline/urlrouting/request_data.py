"""URLRequestData: a framework-neutral snapshot of an HTTP request.

The input type of every parser-printer router. Built from a live
``Request`` by ``wayline.urlrouting.normalize`` or from a URL string by
``URLRequestData.from_url``, and produced by routers when printing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote, unquote, urlsplit

# Characters allowed unescaped in a path segment (RFC 3986 pchar minus "/")
_SEGMENT_SAFE = "-._~!$&'()*+,;=:@"
# Query names and values additionally escape the pair delimiters
_QUERY_SAFE = "-._~!$'()*,;:@/?"

_INVALID_CHARS = re.compile(r"[\x00-\x20\x7f]")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _freeze_fields[V](fields: Mapping[str, Iterable[V]]) -> Mapping[str, tuple[V, ...]]:
    return MappingProxyType({name: tuple(values) for name, values in fields.items()})


@dataclass(frozen=True, slots=True)
class URLRequestData:
    """A read-only, framework-independent description of an HTTP request.

    ``path`` holds percent-decoded, non-empty segments. ``query`` maps a
    name to every value it was given, in order; ``None`` marks a name that
    appeared without ``=``. ``headers`` maps a name (as presented) to its
    value fragments. ``body`` is ``None`` when no body was sent or buffered.
    """

    method: str | None = None
    scheme: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    port: int | None = None
    path: Sequence[str] = ()
    query: Mapping[str, Sequence[str | None]] = field(default_factory=dict)
    headers: Mapping[str, Sequence[str]] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "query", _freeze_fields(self.query))
        object.__setattr__(self, "headers", _freeze_fields(self.headers))

    # -- Factory --

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        method: str | None = None,
        headers: Mapping[str, Sequence[str]] | None = None,
        body: bytes | None = None,
    ) -> URLRequestData:
        """Build a description from an absolute or origin-form URL.

        Raises:
            ValueError: If *url* cannot be decomposed into URL components.
        """
        parts = split_url(url)
        return cls(
            method=method,
            scheme=parts.scheme,
            user=parts.user,
            password=parts.password,
            host=parts.host,
            port=parts.port,
            path=parts.path,
            query=parts.query,
            headers=headers or {},
            body=body,
        )

    # -- Rendering --

    @property
    def path_string(self) -> str:
        """The path rendered with percent-encoding, always starting with ``/``."""
        return "/" + "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in self.path)

    @property
    def query_string(self) -> str:
        """The query rendered as ``name=value`` pairs in insertion order."""
        pairs: list[str] = []
        for name, values in self.query.items():
            encoded = quote(name, safe=_QUERY_SAFE)
            for value in values:
                if value is None:
                    pairs.append(encoded)
                else:
                    pairs.append(f"{encoded}={quote(value, safe=_QUERY_SAFE)}")
        return "&".join(pairs)

    @property
    def target(self) -> str:
        """Path plus query string, as sent on an HTTP request line."""
        qs = self.query_string
        return f"{self.path_string}?{qs}" if qs else self.path_string

    @property
    def url(self) -> str:
        """Absolute URL when a host is known, otherwise the request target."""
        if self.host is None:
            return self.target
        userinfo = ""
        if self.user is not None:
            userinfo = quote(self.user, safe="")
            if self.password is not None:
                userinfo += ":" + quote(self.password, safe="")
            userinfo += "@"
        host = f"[{self.host}]" if ":" in self.host else self.host
        port = f":{self.port}" if self.port is not None else ""
        return f"{self.scheme or 'http'}://{userinfo}{host}{port}{self.target}"


@dataclass(frozen=True, slots=True)
class URLParts:
    """Components of a decomposed URL string."""

    scheme: str | None
    user: str | None
    password: str | None
    host: str | None
    port: int | None
    path: tuple[str, ...]
    query: dict[str, list[str | None]]


def split_url(url: str) -> URLParts:
    """Decompose *url* into components.

    Origin-form targets (``/a/b?c=d``) are split by hand so a leading
    ``//`` is never mistaken for an authority.

    Raises:
        ValueError: On whitespace, control or unencoded non-ASCII
            characters, malformed percent-escapes, or an invalid authority.
    """
    if _INVALID_CHARS.search(url):
        msg = f"URL contains whitespace or control characters: {url!r}"
        raise ValueError(msg)
    if _NON_ASCII.search(url):
        msg = f"URL contains unencoded non-ASCII characters: {url!r}"
        raise ValueError(msg)
    if _BAD_ESCAPE.search(url):
        msg = f"URL contains a malformed percent-escape: {url!r}"
        raise ValueError(msg)

    if url.startswith("/") or not url:
        target = url.partition("#")[0]
        raw_path, _, raw_query = target.partition("?")
        return URLParts(
            scheme=None,
            user=None,
            password=None,
            host=None,
            port=None,
            path=split_path(raw_path),
            query=parse_query(raw_query),
        )

    parts = urlsplit(url)
    port = parts.port  # raises ValueError for out-of-range or non-numeric ports
    return URLParts(
        scheme=parts.scheme or None,
        user=unquote(parts.username) if parts.username is not None else None,
        password=unquote(parts.password) if parts.password is not None else None,
        host=parts.hostname or None,
        port=port,
        path=split_path(parts.path),
        query=parse_query(parts.query),
    )


def split_path(raw_path: str) -> tuple[str, ...]:
    """Split a raw path into percent-decoded, non-empty segments."""
    return tuple(unquote(segment) for segment in raw_path.split("/") if segment)


def parse_query(raw_query: str) -> dict[str, list[str | None]]:
    """Parse a raw query string, preserving order and multiplicity.

    ``+`` is kept literally (URL-component decoding, not form decoding).
    A name without ``=`` maps to ``None``; ``name=`` maps to ``""``.
    """
    query: dict[str, list[str | None]] = {}
    if not raw_query:
        return query
    for pair in raw_query.split("&"):
        if not pair:
            continue
        name, sep, value = pair.partition("=")
        query.setdefault(unquote(name), []).append(unquote(value) if sep else None)
    return query
