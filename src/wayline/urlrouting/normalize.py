"""Request normalization: live ``Request`` -> ``URLRequestData``.

Pure and synchronous. The body must already be buffered by the caller;
nothing here touches the ASGI receive channel.
"""

from __future__ import annotations

import base64
import binascii
from urllib.parse import urlsplit

from wayline.http.request import Request
from wayline.urlrouting.request_data import URLRequestData, split_url


def request_data_from_request(request: Request) -> URLRequestData | None:
    """Describe *request* as ``URLRequestData``.

    Returns ``None`` only when the request target cannot be decomposed
    into URL components. Malformed headers leave their fields empty.
    """
    try:
        parts = split_url(request.url)
    except ValueError:
        return None

    scheme, host, port = parts.scheme, parts.host, parts.port
    if host is None:
        host, port = _authority(request)
    if scheme is None:
        scheme = request.scheme

    user, password = parts.user, parts.password
    if user is None:
        credentials = basic_credentials(request.headers.get("authorization"))
        if credentials is not None:
            user, password = credentials

    return URLRequestData(
        method=request.method,
        scheme=scheme,
        user=user,
        password=password,
        host=host,
        port=port,
        path=parts.path,
        query=parts.query,
        headers=_flatten_headers(request.headers.multi_items()),
        body=request.buffered_body or None,
    )


def _authority(request: Request) -> tuple[str | None, int | None]:
    """Host and port from the ``Host`` header, else the server address.

    A ``Host`` header with an unreadable port is ignored.
    """
    header = request.headers.get("host")
    if header:
        try:
            parts = urlsplit(f"//{header.strip()}")
            return parts.hostname or None, parts.port
        except ValueError:
            pass
    if request.server is not None:
        host, port = request.server
        return host, port
    return None, None


def basic_credentials(authorization: str | None) -> tuple[str, str] | None:
    """Decode ``Basic <base64(user:password)>``; ``None`` if absent or malformed."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not token:
        return None
    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def split_header_value(value: str) -> list[str]:
    """Split a header value on every comma, stripping each fragment.

    Quoting is not interpreted, so a quoted string containing a comma is
    split too. Empty fragments are kept.
    """
    return [fragment.strip() for fragment in value.split(",")]


def _flatten_headers(lines: list[tuple[str, str]]) -> dict[str, list[str]]:
    headers: dict[str, list[str]] = {}
    for name, value in lines:
        headers.setdefault(name, []).extend(split_header_value(value))
    return headers
