"""What a middleware looks like.

Any ``async`` callable taking ``(request, next)`` and returning a
response qualifies. ``RoutingMiddleware`` is one; so is a plain
function::

    async def vary_on_accept(request: Request, next: Next) -> AnyResponse:
        response = await next(request)
        return response.with_header("Vary", "Accept")

``next`` runs the rest of the chain: later middleware, then the path
table. Middleware run in registration order, the first registered
outermost.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wayline.http.request import Request
from wayline.http.response import Response

type AnyResponse = Response

type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Structural type for middleware callables."""

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
