"""Endpoint table with exact-path lookup.

Endpoints are registered during setup and frozen into an immutable
lookup structure by ``compile()``. After that, concurrent resolution
needs no locking.
"""

from collections.abc import Iterable, Iterator

from armadito_api.errors import ConfigurationError
from armadito_api.routing.endpoint import Endpoint


class EndpointTable:
    """Compiled endpoint table.

    Usage::

        table = EndpointTable()
        table.add(Endpoint("/ping", frozenset({"GET"}), True, PingHandler()))
        table.compile()
        endpoint = table.resolve("/ping")
    """

    __slots__ = ("_compiled", "_endpoints")

    def __init__(self, endpoints: Iterable[Endpoint] = ()) -> None:
        self._endpoints: dict[str, Endpoint] = {}
        self._compiled = False
        for endpoint in endpoints:
            self.add(endpoint)

    def add(self, endpoint: Endpoint) -> None:
        """Add an endpoint. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add endpoints after compilation."
            raise RuntimeError(msg)
        if not endpoint.path.startswith("/"):
            msg = f"Endpoint path must start with '/': {endpoint.path!r}"
            raise ConfigurationError(msg)
        if not endpoint.methods:
            msg = f"Endpoint {endpoint.path!r} accepts no HTTP method."
            raise ConfigurationError(msg)
        if endpoint.path in self._endpoints:
            msg = f"Duplicate endpoint path {endpoint.path!r}."
            raise ConfigurationError(msg)
        self._endpoints[endpoint.path] = endpoint

    def compile(self) -> None:
        """Freeze the table. No more endpoints can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def resolve(self, path: str) -> Endpoint | None:
        """Return the endpoint registered for exactly *path*, or None."""
        return self._endpoints.get(path)

    @property
    def endpoints(self) -> list[Endpoint]:
        """All registered endpoints, in registration order."""
        return list(self._endpoints.values())

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints.values())

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, path: object) -> bool:
        return path in self._endpoints
