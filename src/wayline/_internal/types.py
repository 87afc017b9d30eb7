"""Callable shapes accepted by the App's registration methods."""

from collections.abc import Callable
from typing import Any

# @app.route target: parameters are injected by name (request, {placeholders})
type Handler = Callable[..., Any]

# @app.error target: takes (), (request) or (request, exc)
type ErrorHandler = Callable[..., Any]

# app.mount target: called as handler(request, route_value)
type RouteHandler = Callable[[Any, Any], Any]

type ErrorHandlers = dict[int | type, ErrorHandler]
