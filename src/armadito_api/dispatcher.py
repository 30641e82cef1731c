"""Dispatcher — serves one API request from precondition checks to envelope.

The only component that sees a request end to end::

    precondition pipeline → body parse → parameter check → process → envelope

The dispatcher holds immutable collaborators only (endpoint table, canned
responses, configuration) plus a reference to the client registry, which
synchronizes itself. It is safe to call ``serve()`` from many threads at
once.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from armadito_api.clients import ClientRegistry
from armadito_api.config import ApiConfig
from armadito_api.envelope import (
    CannedResponses,
    internal_error_response,
    json_response,
    parse_json_body,
)
from armadito_api.errors import ClientError, ServerError
from armadito_api.http.headers import HeaderSource, Headers
from armadito_api.http.request import ApiRequest
from armadito_api.http.response import ApiResponse
from armadito_api.precondition import check_preconditions
from armadito_api.routing.endpoint import Endpoint, ProcessResult, RequestContext
from armadito_api.routing.table import EndpointTable

logger = logging.getLogger("armadito_api.dispatcher")

INTERNAL_ERROR = ServerError()


@dataclass(slots=True)
class Exchange:
    """Mutable per-request state. Lives inside one ``request_scope``."""

    request: ApiRequest
    endpoint: Endpoint
    document: Any = None
    response_document: Any = None


@contextmanager
def request_scope(request: ApiRequest, endpoint: Endpoint) -> Iterator[Exchange]:
    """Own the parsed request and response documents for one call.

    References are dropped on every exit path: success, each rejection,
    and internal failure.
    """
    exchange = Exchange(request=request, endpoint=endpoint)
    try:
        yield exchange
    finally:
        exchange.document = None
        exchange.response_document = None


class Dispatcher:
    """Serves API requests against a fixed endpoint table.

    Usage::

        dispatcher = Dispatcher(default_table(), ClientRegistry(), user_data=LocalBackend())
        response = dispatcher.serve("GET", "/version", {"User-Agent": "cli"})
        assert response.status == 200
    """

    __slots__ = ("_canned", "_clients", "_config", "_table", "_user_data")

    def __init__(
        self,
        table: EndpointTable,
        clients: ClientRegistry,
        *,
        user_data: Any = None,
        config: ApiConfig | None = None,
        canned: CannedResponses | None = None,
    ) -> None:
        if not table.compiled:
            table.compile()
        self._table = table
        self._clients = clients
        self._user_data = user_data
        self._config = config or ApiConfig()
        self._canned = canned or CannedResponses.build()

    @property
    def clients(self) -> ClientRegistry:
        return self._clients

    @property
    def table(self) -> EndpointTable:
        return self._table

    @property
    def canned(self) -> CannedResponses:
        return self._canned

    def serve(
        self,
        method: str,
        path: str,
        headers: Headers | HeaderSource | None = None,
        body: bytes | str | None = b"",
        *,
        query: bytes | str = b"",
    ) -> ApiResponse:
        """Serve one request given as raw transport values."""
        request = ApiRequest.build(
            method,
            path,
            headers,
            body,
            query=query,
            token_header=self._config.token_header,
        )
        return self.dispatch(request)

    def dispatch(self, request: ApiRequest) -> ApiResponse:
        """Serve one already-built request. Always returns exactly one response."""
        logger.debug("request to API: %s %s", request.method, request.path)

        outcome = check_preconditions(self._table, request)
        if isinstance(outcome, ClientError):
            return self._canned.for_status(outcome.status)

        with request_scope(request, outcome) as exchange:
            return self._process(exchange)

    def _process(self, exchange: Exchange) -> ApiResponse:
        request = exchange.request
        endpoint = exchange.endpoint
        path = request.path

        if request.method == "POST" and request.body:
            try:
                exchange.document = parse_json_body(request.body)
            except ValueError:
                logger.warning("request to API path %s does not contain valid JSON", path)
                return self._canned.bad_request

        ctx = RequestContext(request=request, clients=self._clients)

        try:
            rejected = endpoint.rejects(ctx, exchange.document)
        except Exception:
            logger.exception("parameter check for API path %s raised", path)
            return self._internal_error(None)
        if rejected:
            logger.warning("request to API path %s does not contain valid parameters", path)
            return self._canned.unprocessable

        try:
            result = _as_result(endpoint.process(ctx, exchange.document, self._user_data))
        except Exception:
            logger.exception("processing request to API path %s raised", path)
            return self._internal_error(None)

        exchange.response_document = result.document

        if not result.ok:
            logger.warning("processing request to API path %s failed", path)
            return self._internal_error(exchange.response_document)

        try:
            return json_response(
                200, exchange.response_document, api_version=self._config.api_version
            )
        except (TypeError, ValueError):
            logger.exception("response for API path %s is not serializable", path)
            return self._internal_error(None)

    def _internal_error(self, document: Any) -> ApiResponse:
        api_version = self._config.api_version
        try:
            return internal_error_response(document, error=INTERNAL_ERROR, api_version=api_version)
        except (TypeError, ValueError):
            logger.exception("error data is not serializable, dropping it")
            return internal_error_response(None, error=INTERNAL_ERROR, api_version=api_version)


def _as_result(value: Any) -> ProcessResult:
    """Accept a ``ProcessResult`` or a plain ``(ok, document)`` tuple."""
    if isinstance(value, ProcessResult):
        return value
    if isinstance(value, tuple) and 1 <= len(value) <= 2:
        return ProcessResult(*value)
    msg = f"process callback returned {type(value).__name__}, expected ProcessResult"
    raise TypeError(msg)
