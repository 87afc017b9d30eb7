"""Bidirectional URL routing.

A router is a grammar over ``URLRequestData`` that both parses a request
into a typed route value and prints a route value back into a request::

    from dataclasses import dataclass

    from wayline.urlrouting import Digits, OneOf, Path, Route

    @dataclass(frozen=True)
    class Home: ...

    @dataclass(frozen=True)
    class Episode:
        id: int

    router = OneOf(
        Route(Home),
        Route(Episode, Path("episodes", Digits())),
    )

    router.parse("/episodes/42")     # Episode(id=42)
    router.path_for(Episode(id=42))  # "/episodes/42"

Mount a router on an app with ``App.mount(router, handler)``.
"""

from wayline.urlrouting.conversions import (
    JSON,
    UTF8,
    Choice,
    Conversion,
    Data,
    Digits,
    Float,
    Int,
    Text,
    UUIDString,
)
from wayline.urlrouting.core import BaseURL, OneOf, ParserPrinter, RequestInput, Route
from wayline.urlrouting.errors import ParsingError, PrintingError, RoutingError
from wayline.urlrouting.middleware import RoutingMiddleware
from wayline.urlrouting.normalize import request_data_from_request
from wayline.urlrouting.parsers import (
    MISSING,
    Body,
    Field,
    Headers,
    Host,
    Method,
    Path,
    PathEnd,
    Query,
    Scheme,
)
from wayline.urlrouting.request_data import URLRequestData

__all__ = [
    "JSON",
    "MISSING",
    "UTF8",
    "BaseURL",
    "Body",
    "Choice",
    "Conversion",
    "Data",
    "Digits",
    "Field",
    "Float",
    "Headers",
    "Host",
    "Int",
    "Method",
    "OneOf",
    "ParserPrinter",
    "ParsingError",
    "Path",
    "PathEnd",
    "PrintingError",
    "Query",
    "RequestInput",
    "Route",
    "RoutingError",
    "RoutingMiddleware",
    "Scheme",
    "Text",
    "URLRequestData",
    "UUIDString",
    "request_data_from_request",
]
