"""Turning exceptions into responses.

``HTTPError`` subclasses (including those a mounted router re-raises in
production) and unexpected exceptions both end here. A handler
registered with ``@app.error`` wins; otherwise a plain-text default is
built.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from wayline._internal.invoke import invoke
from wayline._internal.types import ErrorHandlers
from wayline.errors import HTTPError
from wayline.http.request import Request
from wayline.http.response import Response
from wayline.server.negotiation import negotiate

logger = logging.getLogger("wayline.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Call *handler* with as many of ``(request, exc)`` as it accepts."""
    arity = len(inspect.signature(handler).parameters)
    args = (request, exc)[: min(arity, 2)]
    return negotiate(await invoke(handler, *args))


def _lookup(error_handlers: ErrorHandlers, *keys: int | type) -> Callable[..., Any] | None:
    for key in keys:
        handler = error_handlers.get(key)
        if handler is not None:
            return handler
    return None


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Build the response for an ``HTTPError``.

    Handlers are looked up by exception type first, then by status. A
    handler that returns a plain 200 gets the error's status instead.
    """
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = _lookup(error_handlers, type(exc), exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        return response.with_status(exc.status) if response.status == 200 else response

    if not exc.detail:
        text = f"Error {exc.status}"
    elif debug:
        text = f"{exc.status}: {exc.detail}"
    else:
        text = exc.detail

    response = Response.plain(text, status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Log an unexpected exception and answer 500.

    In debug mode the default body is the formatted traceback.
    """
    logger.exception("500 %s %s", request.method, request.path)

    handler = _lookup(error_handlers, 500, type(exc))
    if handler is not None:
        return await call_error_handler(handler, request, exc)

    text = "".join(traceback.format_exception(exc)) if debug else "Internal Server Error"
    return Response.plain(text, status=500)
