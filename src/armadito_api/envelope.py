"""JSON envelope protocol.

Request bodies are parsed into JSON documents; responses are serialized
compactly and wrapped with the standard headers. Precondition failures
use six canned responses that are built once and shared by every request.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from armadito_api.config import API_VERSION, API_VERSION_HEADER
from armadito_api.errors import ServerError
from armadito_api.http.response import ApiResponse

logger = logging.getLogger("armadito_api.envelope")

JSON_CONTENT_TYPE = "application/json"

JSON_400 = (
    '{"code":400, "message": "Bad Request. Make sure your request has a '
    'X-Armadito-Token header and if POST request contains valid JSON"}'
)
JSON_403 = (
    '{"code":403, "message": "Request forbidden. Make sure your request has a '
    'User-Agent header"}'
)
JSON_404 = '{"code":404, "message": "Not found"}'
JSON_405 = '{"code":405, "message": "Method not allowed"}'
JSON_415 = (
    '{"code":415, "message": "Unsupported Media Type. '
    'Content-Type must be application/json"}'
)
JSON_422 = (
    '{"code":422, "message": "Unprocessable request. '
    'Make sure the JSON request is valid"}'
)


def dump_json(document: Any) -> bytes:
    """Serialize *document* compactly as UTF-8 JSON.

    Raises ``ValueError`` for NaN or infinite floats, which have no JSON
    representation.
    """
    return json.dumps(
        document, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


def parse_json_body(body: bytes) -> Any:
    """Parse a request body into a JSON document.

    Only an object or an array is accepted at the top level, and the
    ``NaN``/``Infinity`` extensions are refused. Raises ``ValueError``
    (``json.JSONDecodeError`` or ``UnicodeDecodeError`` included) for
    anything else.
    """
    try:
        document = json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
        if not isinstance(document, (dict, list)):
            kind = type(document).__name__
            msg = f"top-level JSON value must be an object or an array, got {kind}"
            raise ValueError(msg)
    except ValueError as exc:
        logger.warning("error in JSON parsing: %s", exc)
        raise
    return document


def json_response(status: int, document: Any, *, api_version: str = API_VERSION) -> ApiResponse:
    """Wrap *document* in a response carrying the four standard headers.

    An absent document is sent as an empty JSON object.
    """
    if document is None:
        document = {}
    return ApiResponse(
        body=dump_json(document),
        status=status,
        headers=(
            ("Content-Type", JSON_CONTENT_TYPE),
            ("Connection", "close"),
            ("Access-Control-Allow-Origin", "*"),
            (API_VERSION_HEADER, api_version),
        ),
    )


def internal_error_response(
    document: Any = None,
    *,
    error: ServerError | None = None,
    api_version: str = API_VERSION,
) -> ApiResponse:
    """Wrap the callback's partial *document* inside the 500 error object.

    The ``code`` and ``message`` fields come from *error*, a default
    ``ServerError`` when omitted.
    """
    error = error or ServerError()
    body: dict[str, Any] = {"code": error.status, "message": error.message}
    if document is not None:
        body["data"] = document
    return json_response(error.status, body, api_version=api_version)


def _canned(status: int, body: str) -> ApiResponse:
    return ApiResponse(
        body=body.encode("utf-8"),
        status=status,
        headers=(("Content-Type", JSON_CONTENT_TYPE), ("Connection", "close")),
    )


@dataclass(frozen=True, slots=True)
class CannedResponses:
    """The six precondition failure responses, built once at startup.

    They carry no per-request data, so one instance is shared read-only
    by all concurrent requests.
    """

    bad_request: ApiResponse
    forbidden: ApiResponse
    not_found: ApiResponse
    method_not_allowed: ApiResponse
    unsupported_media_type: ApiResponse
    unprocessable: ApiResponse

    @classmethod
    def build(cls) -> "CannedResponses":
        return cls(
            bad_request=_canned(400, JSON_400),
            forbidden=_canned(403, JSON_403),
            not_found=_canned(404, JSON_404),
            method_not_allowed=_canned(405, JSON_405),
            unsupported_media_type=_canned(415, JSON_415),
            unprocessable=_canned(422, JSON_422),
        )

    def for_status(self, status: int) -> ApiResponse:
        """Return the canned response for a 4xx *status*.

        Raises ``KeyError`` for statuses without a canned body.
        """
        by_status = {
            400: self.bad_request,
            403: self.forbidden,
            404: self.not_found,
            405: self.method_not_allowed,
            415: self.unsupported_media_type,
            422: self.unprocessable,
        }
        return by_status[status]
