"""The standard Armadito API endpoints.

``default_table()`` builds the fixed endpoint table::

    /register    GET   no token
    /unregister  GET   token
    /ping        GET   token
    /event       GET   token
    /scan        POST  token, parameters checked
    /status      GET   no token
    /browse      GET   no token
    /version     GET   no token
"""

from armadito_api.config import ApiConfig
from armadito_api.endpoints.backend import Backend, LocalBackend
from armadito_api.endpoints.info import BrowseHandler, StatusHandler, VersionHandler
from armadito_api.endpoints.scan import ScanHandler
from armadito_api.endpoints.session import (
    EventHandler,
    PingHandler,
    RegisterHandler,
    UnregisterHandler,
)
from armadito_api.routing.endpoint import Endpoint
from armadito_api.routing.table import EndpointTable

GET = frozenset({"GET"})
POST = frozenset({"POST"})


def default_endpoints(config: ApiConfig | None = None) -> list[Endpoint]:
    """Return the eight standard endpoints, configured from *config*."""
    config = config or ApiConfig()
    return [
        Endpoint("/register", GET, False, RegisterHandler()),
        Endpoint("/unregister", GET, True, UnregisterHandler()),
        Endpoint("/ping", GET, True, PingHandler()),
        Endpoint("/event", GET, True, EventHandler(timeout=config.event_timeout), long_poll=True),
        Endpoint("/scan", POST, True, ScanHandler()),
        Endpoint("/status", GET, False, StatusHandler()),
        Endpoint("/browse", GET, False, BrowseHandler()),
        Endpoint("/version", GET, False, VersionHandler(api_version=config.api_version)),
    ]


def default_table(config: ApiConfig | None = None) -> EndpointTable:
    """Build and compile the standard endpoint table."""
    table = EndpointTable(default_endpoints(config))
    table.compile()
    return table


__all__ = [
    "Backend",
    "BrowseHandler",
    "EventHandler",
    "LocalBackend",
    "PingHandler",
    "RegisterHandler",
    "ScanHandler",
    "StatusHandler",
    "UnregisterHandler",
    "VersionHandler",
    "default_endpoints",
    "default_table",
]
