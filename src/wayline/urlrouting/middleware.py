"""Dispatch middleware for a mounted parser-printer router.

Buffers the body, normalizes the request, parses it with the router and
hands the route value to the application's handler. Requests the router
does not describe fall through to the rest of the pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from wayline._internal.invoke import invoke
from wayline.config import DEFAULT_MAX_CONTENT_LENGTH
from wayline.http.request import Request
from wayline.http.response import Response
from wayline.server.negotiation import negotiate
from wayline.urlrouting.core import ParserPrinter
from wayline.urlrouting.errors import ParsingError
from wayline.urlrouting.normalize import request_data_from_request

if TYPE_CHECKING:
    from wayline.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("wayline.routing")

type RouteResponder = Callable[[Request, Any], Any]


class RoutingMiddleware:
    """Route requests through *router* and answer them with *respond*.

    ``respond(request, route)`` may be sync or async and may return
    anything ``negotiate`` understands. Exceptions it raises propagate.

    When the router rejects a request, the next responder gets a chance.
    If that also fails, production re-raises its error; development
    answers 404 with the routing diagnostic instead::

        app.add_middleware(RoutingMiddleware(router, respond, development=True))
    """

    __slots__ = ("development", "max_body_size", "respond", "router")

    def __init__(
        self,
        router: ParserPrinter,
        respond: RouteResponder,
        *,
        development: bool = False,
        max_body_size: int = DEFAULT_MAX_CONTENT_LENGTH,
    ) -> None:
        self.router = router
        self.respond = respond
        self.development = development
        self.max_body_size = max_body_size

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if not request.is_body_buffered and request.body_expected:
            await request.collect_body(max_size=self.max_body_size)

        data = request_data_from_request(request)
        if data is None:
            logger.debug("Unparsable request target %r, delegating", request.url)
            return await next(request)

        try:
            route = self.router.parse(data)
        except ParsingError as routing_error:
            return await self._delegate(request, next, routing_error)

        return negotiate(await invoke(self.respond, request, route))

    async def _delegate(
        self, request: Request, next: Next, routing_error: ParsingError
    ) -> AnyResponse:
        logger.debug("No route for %s %s, delegating", request.method, request.path)
        try:
            return await next(request)
        except Exception:
            logger.info("%s", routing_error)
            if not self.development:
                raise
            return Response.plain(f"Routing {routing_error}", status=404)
