"""Client session endpoints: ``/register``, ``/unregister``, ``/ping``, ``/event``.

These only need the client registry. Registry outcomes come back as
``RegistryStatus`` values and are reported in the response document.
"""

import logging
import secrets
from typing import Any

from armadito_api.clients import ApiClient, RegistryStatus
from armadito_api.routing.endpoint import ProcessResult, RequestContext

logger = logging.getLogger("armadito_api.endpoints")

TOKEN_ALREADY_REGISTERED = {"error": "token already registered"}
TOKEN_NOT_REGISTERED = {"error": "token not registered"}


def resolve_client(ctx: RequestContext) -> ApiClient | None:
    """Return the registered client for the request token, if any."""
    token = ctx.token
    if token is None:
        return None
    return ctx.clients.get(token)


class RegisterHandler:
    """Issue a fresh token and register a client under it."""

    check = None

    def __init__(self, token_bytes: int = 16) -> None:
        self.token_bytes = token_bytes

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        token = secrets.token_hex(self.token_bytes)
        client = ApiClient(token=token, user_agent=ctx.request.user_agent)
        if ctx.clients.add(token, client) is RegistryStatus.ALREADY_REGISTERED:
            return ProcessResult.failure(dict(TOKEN_ALREADY_REGISTERED))
        logger.info("registered API client %s (%s)", token, client.user_agent)
        return ProcessResult.success({"token": token})


class UnregisterHandler:
    check = None

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        if ctx.clients.remove(ctx.token or "") is RegistryStatus.NOT_REGISTERED:
            return ProcessResult.failure(dict(TOKEN_NOT_REGISTERED))
        logger.info("unregistered API client %s", ctx.token)
        return ProcessResult.success({})


class PingHandler:
    check = None

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        if resolve_client(ctx) is None:
            return ProcessResult.failure(dict(TOKEN_NOT_REGISTERED))
        return ProcessResult.success({"status": "ok"})


class EventHandler:
    """Long-poll the client's event queue.

    Blocks the calling worker thread for up to ``timeout`` seconds and
    answers ``{}`` when no event arrived. A client unregistered while
    waiting ends the poll at once with the not-registered failure.
    """

    check = None

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        client = resolve_client(ctx)
        if client is None:
            return ProcessResult.failure(dict(TOKEN_NOT_REGISTERED))
        event = client.next_event(timeout=self.timeout)
        if event is None and client.closed:
            return ProcessResult.failure(dict(TOKEN_NOT_REGISTERED))
        return ProcessResult.success(event if event is not None else {})
