"""Handler return values to Responses.

Both path-table handlers and mounted-router handlers may return any of
the shapes below; ``negotiate`` is the single place that decides what
each becomes.
"""

import dataclasses
from typing import Any

from wayline.http.response import Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert a handler's return value to a Response.

    ``Response``             -> unchanged
    ``Redirect``             -> its status with a ``Location`` header
    ``None``                 -> 204, empty body
    ``str``                  -> 200, text/html
    ``bytes``                -> 200, application/octet-stream
    ``dict`` / ``list``      -> 200, JSON
    dataclass instance       -> 200, JSON of its fields
    ``(value, status)``      -> *value* negotiated, status replaced
    ``(value, status, hdrs)``-> as above, headers appended

    Raises:
        TypeError: For any other value.
    """
    match value:
        case Response():
            return value
        case Redirect(url=url, status=status, headers=headers):
            return Response(status=status, headers=(("Location", url), *headers))
        case None:
            return Response(status=204)
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response.json(value)
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner).with_status(status).with_headers(headers)
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return Response.json(dataclasses.asdict(value))
    raise TypeError(
        f"Cannot convert {type(value).__name__} to a response. Return str, bytes, "
        "dict, list, a dataclass, None, Response, or Redirect."
    )
