"""Response emission: one Response becomes two ASGI messages."""

from wayline._internal.asgi import Send
from wayline.http.response import Response

# 1xx, 204 and 304 never carry a message body.
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, body_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type)]
    pairs.extend((name.lower(), value) for name, value in response.headers)
    pairs.append(("content-length", str(body_length)))
    return [(name.encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send ``http.response.start`` then a single ``http.response.body``.

    With *head* set the body is withheld, but ``content-length`` still
    reports the size a ``GET`` would have received.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
