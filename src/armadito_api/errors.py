"""armadito_api exception hierarchy.

Shared across the endpoint table, precondition pipeline, dispatcher and
endpoints so every module raises and catches the same types.

Request handling never raises these across the dispatcher boundary: the
precondition pipeline returns a ``ClientError`` value and the dispatcher
turns it into a canned response.
"""

from dataclasses import dataclass

INTERNAL_ERROR_MESSAGE = "Request processing triggered an internal error"


class ApiError(Exception):
    """Base for all armadito_api errors."""


class ConfigurationError(ApiError):
    """Raised when the endpoint table or app configuration is invalid.

    Typically raised while building the endpoint table at startup.
    """


class BackendError(ApiError):
    """Raised by a ``Backend`` when the antivirus core cannot serve a call.

    Endpoints catch it and report a failure result, which the dispatcher
    wraps in the 500 envelope.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(ApiError):
    """An error that maps directly to an HTTP status code."""

    status: int
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}: {self.message}"
        return str(self.status)


class ClientError(HTTPError):
    """4xx: malformed, unauthorized or unsupported request. Never retried."""

    def __init__(self, status: int, message: str = "") -> None:
        if not 400 <= status < 500:
            msg = f"ClientError status must be 4xx, got {status}"
            raise ValueError(msg)
        super().__init__(status=status, message=message)


class ServerError(HTTPError):
    """500: a callback failed or its document could not be serialized.

    Carries the ``code`` and ``message`` of the 500 envelope body.
    """

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(status=500, message=message)
