"""ASGI handler — translates ASGI scope/messages to dispatcher calls.

The only component that touches raw ASGI HTTP messages. Buffers the
request body, builds an ``ApiRequest`` and runs the synchronous
dispatcher on an anyio worker thread, so process callbacks that block
(``/event`` long-polls, slow backends) never stall the event loop.

Long-poll endpoints draw their threads from a limiter of their own.
However many ``/event`` calls are waiting, the other endpoints keep
their full thread budget.
"""

import logging
from dataclasses import dataclass
from functools import partial

import anyio

from armadito_api._internal.asgi import Receive, Scope, Send
from armadito_api.dispatcher import Dispatcher
from armadito_api.envelope import internal_error_response
from armadito_api.http.headers import Headers
from armadito_api.http.request import ApiRequest
from armadito_api.http.response import ApiResponse
from armadito_api.routing.endpoint import Endpoint
from armadito_api.server.sender import send_response

logger = logging.getLogger("armadito_api.server")


class BodyTooLarge(Exception):  # noqa: N818
    """The buffered request body exceeded ``max_content_length``."""


@dataclass(frozen=True, slots=True)
class DispatchLimiters:
    """Worker-thread budgets for one event loop.

    anyio limiters belong to the event loop that created them, so each
    server worker builds its own pair on first use.
    """

    requests: anyio.CapacityLimiter
    long_poll: anyio.CapacityLimiter

    @classmethod
    def create(cls, requests: int, long_poll: int) -> "DispatchLimiters":
        return cls(
            requests=anyio.CapacityLimiter(requests),
            long_poll=anyio.CapacityLimiter(long_poll),
        )

    def for_endpoint(self, endpoint: Endpoint | None) -> anyio.CapacityLimiter:
        if endpoint is not None and endpoint.long_poll:
            return self.long_poll
        return self.requests


async def read_body(receive: Receive, max_content_length: int) -> bytes:
    """Read the full request body from ASGI ``http.request`` messages.

    Raises ``BodyTooLarge`` once more than *max_content_length* bytes
    arrived.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if size > max_content_length:
                raise BodyTooLarge(size)
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def _run_dispatch(
    dispatcher: Dispatcher, request: ApiRequest, limiter: anyio.CapacityLimiter
) -> ApiResponse:
    """Run the blocking dispatch in an anyio worker thread."""
    return await anyio.to_thread.run_sync(partial(dispatcher.dispatch, request), limiter=limiter)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    limiters: DispatchLimiters,
    max_content_length: int,
    token_header: str,
    api_version: str,
) -> None:
    """Process a single HTTP request through the dispatcher."""
    if scope["type"] != "http":
        return

    method = scope["method"]
    path = scope["path"]

    try:
        body = await read_body(receive, max_content_length)
    except BodyTooLarge as exc:
        logger.warning("request body for %s exceeds %d bytes (%s)", path, max_content_length, exc)
        await send_response(dispatcher.canned.bad_request, send)
        return

    request = ApiRequest.build(
        method,
        path,
        Headers.coerce(scope.get("headers", ())),
        body,
        query=scope.get("query_string", b""),
        token_header=token_header,
    )
    limiter = limiters.for_endpoint(dispatcher.table.resolve(request.path))

    try:
        response = await _run_dispatch(dispatcher, request, limiter)
    except Exception:
        logger.exception("500 %s %s", method, path)
        response = internal_error_response(api_version=api_version)

    await send_response(response, send)
