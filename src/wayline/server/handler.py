"""ASGI handler: one HTTP request from scope to sent response.

The only component that touches raw ASGI directly. Builds the Request,
runs it through the middleware chain (mounted routers included) down to
the path table, turns failures into error responses, and sends the
result.
"""

import inspect
from collections.abc import Callable
from typing import Any

from wayline._internal.asgi import Receive, Scope, Send
from wayline._internal.invoke import invoke
from wayline._internal.types import ErrorHandlers
from wayline.errors import HTTPError
from wayline.http.request import Request
from wayline.middleware.protocol import AnyResponse, Next
from wayline.routing.route import RouteMatch
from wayline.routing.router import Router
from wayline.server.errors import handle_http_error, handle_internal_error
from wayline.server.negotiation import negotiate
from wayline.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: ErrorHandlers,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    async def path_table(req: Request) -> AnyResponse:
        match = router.match(req.method, req.path)
        return await _call_route(match, req)

    try:
        response = await chain(middleware, path_table)(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    await send_response(response, send, head=request.method == "HEAD")


def chain(middleware: tuple[Callable[..., Any], ...], endpoint: Next) -> Next:
    """Wrap *endpoint* so the first middleware runs outermost."""
    handler = endpoint
    for mw in reversed(middleware):

        async def step(req: Request, _mw: Any = mw, _next: Next = handler) -> AnyResponse:
            return await _mw(req, _next)

        handler = step
    return handler


async def _call_route(match: RouteMatch, request: Request) -> AnyResponse:
    """Call a path-table handler and negotiate its return value.

    Parameters named ``request`` (or annotated ``Request``) receive the
    request; parameters named like a ``{placeholder}`` receive the
    captured segment, converted by their annotation when it accepts it.
    """
    kwargs: dict[str, Any] = {}
    signature = inspect.signature(match.route.handler, eval_str=True)
    for name, param in signature.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in match.path_params:
            kwargs[name] = _convert(match.path_params[name], param.annotation)
    return negotiate(await invoke(match.route.handler, **kwargs))


def _convert(value: str, annotation: Any) -> Any:
    if annotation is inspect.Parameter.empty or annotation is str:
        return value
    try:
        return annotation(value)
    except (TypeError, ValueError):
        return value
