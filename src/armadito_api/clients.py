"""Client registry — token-keyed store of registered API clients.

The only mutable state shared between concurrent requests. Clients are
created by ``/register`` and destroyed by ``/unregister`` or registry
teardown; the registry owns every client it holds and closes it when the
entry goes away.

Thread safety:
    One ``threading.Lock`` serializes every read and write. Registration
    is an administrative, low-churn operation, so a coarse lock is enough.
"""

import logging
import queue
import threading
from dataclasses import dataclass, field
from enum import Enum
from time import time
from typing import Any

logger = logging.getLogger("armadito_api.clients")

# Queued by close() to wake pollers blocked in next_event().
_CLOSED = object()


class RegistryStatus(Enum):
    """Outcome of a registry mutation. Reported as a value, never raised."""

    OK = "ok"
    ALREADY_REGISTERED = "already_registered"
    NOT_REGISTERED = "not_registered"


@dataclass(slots=True, eq=False)
class ApiClient:
    """A registered API client.

    Holds the queue of events waiting to be fetched through ``/event``.
    """

    token: str
    user_agent: str | None = None
    registered_at: float = field(default_factory=time)
    _events: queue.SimpleQueue[Any] = field(default_factory=queue.SimpleQueue, repr=False)
    _closed: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def push_event(self, event: Any) -> None:
        """Queue an event document for the next ``/event`` poll."""
        if self.closed:
            logger.debug("dropping event for closed client %s", self.token)
            return
        self._events.put(event)

    def next_event(self, timeout: float | None = None) -> Any | None:
        """Wait up to *timeout* seconds for the next event.

        Returns None on timeout, and as soon as the client is closed, even
        when the close happens while waiting.
        """
        if self.closed:
            return None
        try:
            event = self._events.get(timeout=timeout)
        except queue.Empty:
            return None
        if event is _CLOSED:
            self._events.put(_CLOSED)
            return None
        return event

    def close(self) -> None:
        """Release the client: drop pending events and refuse new ones.

        Pollers waiting in ``next_event()`` return None immediately.
        """
        self._closed.set()
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                break
        self._events.put(_CLOSED)


class ClientRegistry:
    """Concurrent token → client mapping.

    Usage::

        registry = ClientRegistry()
        registry.add(token, ApiClient(token))
        client = registry.get(token)
        registry.remove(token)   # closes the client
    """

    __slots__ = ("_clients", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clients: dict[str, ApiClient] = {}

    def add(self, token: str, client: ApiClient) -> RegistryStatus:
        """Insert *client* under *token*. An occupied token is never overwritten."""
        with self._lock:
            if token in self._clients:
                logger.warning("API token %s already registered", token)
                return RegistryStatus.ALREADY_REGISTERED
            self._clients[token] = client
        return RegistryStatus.OK

    def get(self, token: str) -> ApiClient | None:
        """Return the client registered under *token*, or None."""
        with self._lock:
            client = self._clients.get(token)
        if client is None:
            logger.warning("API token %s is not registered", token)
        return client

    def remove(self, token: str) -> RegistryStatus:
        """Remove *token* and close its client."""
        with self._lock:
            client = self._clients.pop(token, None)
        if client is None:
            logger.warning("API token %s is not registered", token)
            return RegistryStatus.NOT_REGISTERED
        client.close()
        return RegistryStatus.OK

    def tokens(self) -> list[str]:
        """Snapshot of the registered tokens."""
        with self._lock:
            return list(self._clients)

    def close(self) -> None:
        """Tear the registry down, closing every client it holds."""
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._clients

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def __enter__(self) -> "ClientRegistry":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
