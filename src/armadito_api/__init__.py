"""armadito_api — HTTP API request dispatcher for the Armadito local service.

Authenticates and validates requests against a fixed endpoint table,
speaks JSON in and out, and turns every failure into a deterministic
status and JSON body.

Basic usage::

    from armadito_api import ApiApp

    app = ApiApp(backend=MyBackend())
    app.run()

Without a server::

    response = app.serve("GET", "/version", {"User-Agent": "cli"})
    response.json()  # {"version": "...", "api-version": "armadito.v0"}
"""

__version__ = "0.1.0"
__all__ = [
    "ApiApp",
    "ApiClient",
    "ApiConfig",
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "Backend",
    "BackendError",
    "ClientError",
    "ClientRegistry",
    "ConfigurationError",
    "Dispatcher",
    "Endpoint",
    "EndpointTable",
    "ProcessResult",
    "RegistryStatus",
    "RequestContext",
    "ServerError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import armadito_api`` fast while providing a clean top-level API.
    """
    if name == "ApiApp":
        from armadito_api.app import ApiApp

        return ApiApp

    if name == "ApiConfig":
        from armadito_api.config import ApiConfig

        return ApiConfig

    if name == "Dispatcher":
        from armadito_api.dispatcher import Dispatcher

        return Dispatcher

    if name == "ApiRequest":
        from armadito_api.http.request import ApiRequest

        return ApiRequest

    if name == "ApiResponse":
        from armadito_api.http.response import ApiResponse

        return ApiResponse

    if name in ("ApiClient", "ClientRegistry", "RegistryStatus"):
        from armadito_api import clients as _clients

        return getattr(_clients, name)

    if name in ("Endpoint", "ProcessResult", "RequestContext"):
        from armadito_api.routing import endpoint as _endpoint

        return getattr(_endpoint, name)

    if name == "EndpointTable":
        from armadito_api.routing.table import EndpointTable

        return EndpointTable

    if name == "Backend":
        from armadito_api.endpoints.backend import Backend

        return Backend

    if name in ("ApiError", "BackendError", "ClientError", "ConfigurationError", "ServerError"):
        from armadito_api import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
