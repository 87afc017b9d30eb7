"""Serving an App with pounce.

pounce is an optional dependency (the ``server`` extra); it is imported
only when ``App.run`` is actually called.
"""

import logging

logger = logging.getLogger("wayline.server")


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = True,
    reload_dirs: tuple[str, ...] = (),
    log_level: str = "info",
) -> None:
    """Serve the live *app* object on ``host:port`` until interrupted.

    ``reload`` restarts the server when files under the working
    directory or any of *reload_dirs* change.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    logger.info("Serving on http://%s:%d (reload=%s)", host, port, reload)
    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_dirs=reload_dirs,
        log_level=log_level,
    )
    Server(config, app).run()
