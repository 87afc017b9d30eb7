"""Wayline: invertible URL routing for ASGI applications.

Describe your URLs once as a grammar; parse requests into typed route
values and print route values back into links.

Basic usage::

    from dataclasses import dataclass

    from wayline import App
    from wayline.urlrouting import Digits, OneOf, Path, Route

    @dataclass(frozen=True)
    class Episode:
        id: int

    router = OneOf(Route(Episode, Path("episodes", Digits())))

    def respond(request, route):
        match route:
            case Episode(id=id):
                return f"Episode {id}"

    app = App()
    app.mount(router, respond)
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "ParsingError",
    "PayloadTooLarge",
    "PrintingError",
    "Redirect",
    "Request",
    "Response",
    "RoutingMiddleware",
    "URLRequestData",
    "WaylineError",
]


# Public name -> defining module, imported on first access
_EXPORTS = {
    "App": "wayline.app",
    "AppConfig": "wayline.config",
    "Request": "wayline.http.request",
    "Response": "wayline.http.response",
    "Redirect": "wayline.http.response",
    "AnyResponse": "wayline.middleware.protocol",
    "Middleware": "wayline.middleware.protocol",
    "Next": "wayline.middleware.protocol",
    "ParsingError": "wayline.urlrouting",
    "PrintingError": "wayline.urlrouting",
    "RoutingMiddleware": "wayline.urlrouting",
    "URLRequestData": "wayline.urlrouting",
    "ConfigurationError": "wayline.errors",
    "HTTPError": "wayline.errors",
    "MethodNotAllowed": "wayline.errors",
    "NotFound": "wayline.errors",
    "PayloadTooLarge": "wayline.errors",
    "WaylineError": "wayline.errors",
}


def __getattr__(name: str) -> object:
    module = _EXPORTS.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module), name)
