"""The App: registration during setup, an ASGI callable afterwards.

Everything is registered first (path-table routes, mounted routers,
middleware, error handlers, lifespan hooks). The first ASGI call, or
``run()``, compiles that into immutable runtime state; registering
anything after that point is an error.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wayline._internal.asgi import Receive, Scope, Send
from wayline._internal.invoke import invoke
from wayline._internal.types import ErrorHandler, ErrorHandlers, Handler, RouteHandler
from wayline.config import AppConfig
from wayline.errors import ConfigurationError
from wayline.middleware.protocol import Middleware
from wayline.routing.route import Route
from wayline.routing.router import Router
from wayline.server.handler import handle_request
from wayline.urlrouting.core import ParserPrinter
from wayline.urlrouting.errors import PrintingError
from wayline.urlrouting.middleware import RoutingMiddleware

logger = logging.getLogger("wayline.server")


@dataclass(slots=True)
class _PendingRoute:
    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None

    def compile(self) -> Route:
        methods = self.methods or ["GET"]
        return Route(
            path=self.path,
            handler=self.handler,
            methods=frozenset(method.upper() for method in methods),
            name=self.name,
        )


class App:
    """An ASGI application built around mounted parser-printer routers.

    ``mount`` plugs a router and its handler into the middleware chain;
    ``route`` registers conventional string-pattern routes that answer
    whatever the mounted routers decline::

        app = App(AppConfig(environment="development"))
        app.mount(site_router, respond)

        @app.route("/health")
        def health():
            return "ok"

    Compilation happens once, under a lock, so concurrent first
    requests from several workers see a single compiled state.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_mounted",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._mounted: list[ParserPrinter] = []
        self._error_handlers: ErrorHandlers = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._freeze_lock = threading.Lock()
        self._frozen = False
        # Runtime state, filled in by _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Middleware, ...] = ()

    # -- Setup --

    def mount(self, router: ParserPrinter, handler: RouteHandler) -> None:
        """Answer every request *router* parses with ``handler(request, route)``.

        The router runs as a ``RoutingMiddleware`` at this point of the
        middleware chain. Development mode and the body size limit come
        from ``config``. Requests the router rejects continue down the
        chain.
        """
        self._check_not_frozen()
        middleware = RoutingMiddleware(
            router,
            handler,
            development=self.config.is_development,
            max_body_size=self.config.max_content_length,
        )
        self._middleware_list.append(middleware)
        self._mounted.append(router)

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator for a path-table route (``GET`` unless *methods* says otherwise).

        ``{name}`` segments in *path* are passed to the handler as
        keyword arguments of the same name.
        """

        def register(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, name))
            return func

        return register

    def error(self, key: int | type[Exception]) -> Callable[[ErrorHandler], ErrorHandler]:
        """Decorator for the handler of a status code or exception type."""

        def register(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[key] = func
            return func

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Decorator: run *func* (sync or async) at lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Decorator: run *func* (sync or async) at lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Printing --

    def url_for(self, route: Any) -> str:
        """The URL for *route*, printed by the first mounted router able to.

        Raises:
            PrintingError: Nothing is mounted, or no mounted router
                accepts the value.
        """
        if not self._mounted:
            raise PrintingError("No router is mounted. Call app.mount(router, handler) first.")
        failures: list[str] = []
        for router in self._mounted:
            try:
                return router.url_for(route)
            except PrintingError as exc:
                failures.append(str(exc))
        raise PrintingError(f"No mounted router can print {route!r}: " + "; ".join(failures))

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with pounce; reloads on file changes when ``config.debug``."""
        self._ensure_frozen()

        from wayline.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            reload_dirs=self.config.reload_dirs,
            log_level=self.config.log_level,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_frozen()
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Compilation --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        # Caller holds _freeze_lock
        self._router = Router([pending.compile() for pending in self._pending_routes])
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug(
            "Compiled app: %d path route(s), %d mounted router(s), %d middleware",
            len(self._router),
            len(self._mounted),
            len(self._middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise ConfigurationError(
                "Cannot modify the app after it has started serving requests. "
                "Register routes, routers and middleware before the first request."
            )
