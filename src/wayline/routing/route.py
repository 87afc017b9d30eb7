"""Path-table entries."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """One ``@app.route`` registration.

    ``{name}`` segments in ``path`` capture a single path segment each.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    # Placeholder name -> captured segment, still a string
    path_params: dict[str, str]
