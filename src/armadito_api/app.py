"""ApiApp — the ASGI application around the dispatcher.

Mutable during setup (extra endpoints, shutdown hooks). Frozen at
runtime when ``run()``, ``serve()`` or ``__call__()`` is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from armadito_api._internal.asgi import Receive, Scope, Send
from armadito_api.clients import ClientRegistry
from armadito_api.config import ApiConfig
from armadito_api.dispatcher import Dispatcher
from armadito_api.endpoints import default_endpoints
from armadito_api.endpoints.backend import Backend, LocalBackend
from armadito_api.envelope import CannedResponses
from armadito_api.http.headers import HeaderSource, Headers
from armadito_api.http.response import ApiResponse
from armadito_api.routing.endpoint import Endpoint
from armadito_api.routing.table import EndpointTable
from armadito_api.server.handler import DispatchLimiters, handle_request

logger = logging.getLogger("armadito_api.server")


class ApiApp:
    """The Armadito API application.

    Usage::

        app = ApiApp(backend=MyBackend())
        app.run()

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the dispatcher, even when several ASGI workers hit
        ``__call__()`` concurrently on the first request.
    """

    __slots__ = (
        "_backend",
        "_clients",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_pending_endpoints",
        "_shutdown_hooks",
        "_worker_state",
        "config",
    )

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        backend: Backend | None = None,
        clients: ClientRegistry | None = None,
        endpoints: list[Endpoint] | None = None,
    ) -> None:
        self.config: ApiConfig = config or ApiConfig()
        self._backend: Backend = backend if backend is not None else LocalBackend()
        self._clients: ClientRegistry = clients if clients is not None else ClientRegistry()
        self._pending_endpoints: list[Endpoint] = (
            list(endpoints) if endpoints is not None else default_endpoints(self.config)
        )
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._dispatcher: Dispatcher | None = None
        self._worker_state = threading.local()

    # -- Setup --

    def add_endpoint(self, endpoint: Endpoint) -> None:
        """Register an extra endpoint before the app starts serving."""
        self._check_not_frozen()
        self._pending_endpoints.append(endpoint)

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run during ASGI lifespan shutdown.

        Hooks run in registration order, before the client registry is
        torn down. Sync and async callables are both accepted.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Runtime accessors --

    @property
    def clients(self) -> ClientRegistry:
        return self._clients

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def dispatcher(self) -> Dispatcher:
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher

    def serve(
        self,
        method: str,
        path: str,
        headers: Headers | HeaderSource | None = None,
        body: bytes | str | None = b"",
        *,
        query: bytes | str = b"",
    ) -> ApiResponse:
        """Serve one request synchronously, bypassing ASGI."""
        return self.dispatcher.serve(method, path, headers, body, query=query)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start a pounce server for this app."""
        self._ensure_frozen()

        from armadito_api.server.runner import run_server

        run_server(
            self,
            host=host or self.config.host,
            port=port or self.config.port,
            workers=self.config.workers,
            log_level="debug" if self.config.debug else self.config.log_level,
            keep_alive_timeout=self.config.keep_alive_timeout,
            request_timeout=self.config.request_timeout,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self.dispatcher,
            limiters=self._limiters(),
            max_content_length=self.config.max_content_length,
            token_header=self.config.token_header,
            api_version=self.config.api_version,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, and on shutdown runs the hooks and
        closes every registered client.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def shutdown(self) -> None:
        """Run shutdown hooks, then tear down the client registry."""
        try:
            for hook in self._shutdown_hooks:
                result = hook()
                if inspect.isawaitable(result):
                    await result
        finally:
            self._clients.close()

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the endpoint table and dispatcher.

        MUST only be called while holding _freeze_lock.
        """
        table = EndpointTable(self._pending_endpoints)
        table.compile()
        self._dispatcher = Dispatcher(
            table,
            self._clients,
            user_data=self._backend,
            config=self.config,
            canned=CannedResponses.build(),
        )
        self._frozen = True
        logger.debug("API ready with %d endpoints", len(table))

    def _limiters(self) -> DispatchLimiters:
        """Thread budgets for the calling worker, created on first use.

        Each pounce worker thread runs its own event loop, so limiters are
        kept per thread.
        """
        limiters = getattr(self._worker_state, "limiters", None)
        if limiters is None:
            limiters = DispatchLimiters.create(
                self.config.dispatch_threads, self.config.long_poll_threads
            )
            self._worker_state.limiters = limiters
        return limiters

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register endpoints and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
