"""Precondition pipeline — ordered checks run before any business logic.

Checks run in a fixed order and the first failing one decides the
outcome:

1. path resolves to an endpoint          → 404
2. ``User-Agent`` header present         → 403
3. token header present (if required)    → 400
4. method accepted by the endpoint       → 405
5. POST carries ``application/json``     → 415

Failures are returned as bare ``ClientError`` values, not raised. Only
the status travels; the dispatcher maps it to its canned response, which
holds the one copy of the message text.
"""

import logging

from armadito_api.envelope import JSON_CONTENT_TYPE
from armadito_api.errors import ClientError
from armadito_api.http.request import ApiRequest
from armadito_api.routing.endpoint import Endpoint
from armadito_api.routing.table import EndpointTable

logger = logging.getLogger("armadito_api.precondition")


def check_preconditions(table: EndpointTable, request: ApiRequest) -> Endpoint | ClientError:
    """Resolve the endpoint for *request*, or return the first violation.

    The token check verifies presence only. Whether the token is
    registered is up to the endpoint's own processing.
    """
    path = request.path
    endpoint = table.resolve(path)

    if endpoint is None:
        logger.warning("request to API invalid path %s", path)
        return ClientError(404)

    if request.user_agent is None:
        logger.warning("request to API path %s has no User-Agent header", path)
        return ClientError(403)

    if endpoint.need_token and request.token is None:
        logger.warning("request to API path %s has no %s header", path, request.token_header)
        return ClientError(400)

    if not endpoint.accepts(request.method):
        logger.warning("method %s not allowed for %s", request.method, path)
        return ClientError(405)

    if request.method == "POST":
        content_type = request.content_type
        if content_type != JSON_CONTENT_TYPE:
            logger.warning("invalid Content-Type %s", content_type)
            return ClientError(415)

    return endpoint
