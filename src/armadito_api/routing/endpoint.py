"""Endpoint definition and the callback contracts endpoints implement."""

from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol, runtime_checkable

from armadito_api.clients import ClientRegistry
from armadito_api.http.request import ApiRequest


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Per-request view handed to endpoint callbacks.

    Gives callbacks the request (headers, token, query arguments) and the
    client registry they resolve tokens against.
    """

    request: ApiRequest
    clients: ClientRegistry

    @property
    def token(self) -> str | None:
        return self.request.token


class ProcessResult(NamedTuple):
    """What a process callback returns: success flag and optional document."""

    ok: bool
    document: Any = None

    @classmethod
    def success(cls, document: Any = None) -> "ProcessResult":
        return cls(True, document)

    @classmethod
    def failure(cls, document: Any = None) -> "ProcessResult":
        return cls(False, document)


@runtime_checkable
class EndpointHandler(Protocol):
    """Business logic behind one endpoint.

    ``check`` is optional: handlers that do not validate parameters set
    ``check = None``. When present it returns True to *reject* the request.
    """

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult: ...


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A frozen endpoint definition.

    Created during setup, compiled into the endpoint table at startup.
    ``long_poll`` marks handlers that block waiting for events; the ASGI
    handler runs them on a separate thread budget.
    """

    path: str
    methods: frozenset[str]
    need_token: bool
    handler: EndpointHandler
    long_poll: bool = False

    def accepts(self, method: str) -> bool:
        return method in self.methods

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        return self.handler.process(ctx, document, user_data)

    def rejects(self, ctx: RequestContext, document: Any) -> bool:
        """Run the handler's parameter check, if it has one."""
        check = getattr(self.handler, "check", None)
        if check is None:
            return False
        return bool(check(ctx, document))
