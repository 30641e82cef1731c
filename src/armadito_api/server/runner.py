"""Server runner.

Starts a pounce ASGI server with the live ApiApp object. The dispatcher
imposes no timeout of its own; ``request_timeout`` is enforced here, by
the transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from armadito_api.errors import ConfigurationError

if TYPE_CHECKING:
    from armadito_api.app import ApiApp


def run_server(
    app: ApiApp,
    host: str = "127.0.0.1",
    port: int = 8888,
    *,
    workers: int = 1,
    log_level: str = "info",
    keep_alive_timeout: float = 5.0,
    request_timeout: float = 60.0,
) -> None:
    """Run an ApiApp under pounce.

    Args:
        app: ApiApp instance (an ASGI callable).
        host: Bind address. The API is a local control plane, so the
            default stays on loopback.
        port: Bind port.
        workers: Worker count (0 = auto-detect from CPU count).
        log_level: Log level (debug, info, warning, error, critical).
        keep_alive_timeout: Keep-alive connection timeout (seconds).
            Every response carries ``Connection: close`` anyway.
        request_timeout: Individual request timeout (seconds).
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        msg = (
            "Serving over HTTP requires the 'bengal-pounce' package. "
            "Install it with: pip install armadito-api[server]"
        )
        raise ConfigurationError(msg) from None

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        log_level=log_level,
        keep_alive_timeout=keep_alive_timeout,
        request_timeout=request_timeout,
    )
    server = Server(config, app)
    server.run()
