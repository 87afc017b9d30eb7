"""Middleware: ``async (request, next) -> response`` callables.

``RoutingMiddleware`` is the one wayline ships; ``App.mount`` creates
it for you.
"""

from wayline.middleware.protocol import AnyResponse, Middleware, Next
from wayline.urlrouting.middleware import RoutingMiddleware

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "RoutingMiddleware",
]
