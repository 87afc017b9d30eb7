"""Compiled path table.

The conventional string-pattern routes registered with ``@app.route``.
The table is the innermost responder of the middleware chain, so it is
what a mounted parser-printer router delegates to when it declines a
request.
"""

from dataclasses import dataclass

from wayline.errors import ConfigurationError, MethodNotAllowed, NotFound
from wayline.routing.route import Route, RouteMatch


def split_path(path: str) -> tuple[str, ...]:
    """Split a path into its non-empty segments."""
    return tuple(part for part in path.split("/") if part)


@dataclass(frozen=True, slots=True)
class _CompiledRoute:
    route: Route
    segments: tuple[str, ...]

    def capture(self, parts: tuple[str, ...]) -> dict[str, str] | None:
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for pattern, part in zip(self.segments, parts, strict=True):
            if pattern.startswith("{") and pattern.endswith("}"):
                params[pattern[1:-1]] = part
            elif pattern != part:
                return None
        return params


class Router:
    """Immutable path table. Routes are tried in registration order."""

    __slots__ = ("_compiled",)

    def __init__(self, routes: list[Route]) -> None:
        compiled: list[_CompiledRoute] = []
        for route in routes:
            if "<" in route.path:
                msg = (
                    f"Route path {route.path!r} uses <param> syntax. "
                    "Wayline expects {param} segments, e.g. '/users/{id}'."
                )
                raise ConfigurationError(msg)
            compiled.append(_CompiledRoute(route, split_path(route.path)))
        self._compiled: tuple[_CompiledRoute, ...] = tuple(compiled)

    def __len__(self) -> int:
        return len(self._compiled)

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the route for *method* and *path*.

        Raises:
            NotFound: No route pattern matches the path.
            MethodNotAllowed: A pattern matches, but not for *method*.
        """
        parts = split_path(path)
        allowed: set[str] = set()
        for compiled in self._compiled:
            params = compiled.capture(parts)
            if params is None:
                continue
            methods = compiled.route.methods
            if method in methods or (method == "HEAD" and "GET" in methods):
                return RouteMatch(route=compiled.route, path_params=params)
            allowed.update(methods)
        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route for {method} {path}")
