"""ASGI response sending — translates ApiResponse into ASGI messages."""

from armadito_api._internal.asgi import Send
from armadito_api.http.response import ApiResponse


async def send_response(response: ApiResponse, send: Send) -> None:
    """Translate an ApiResponse into ASGI send() calls.

    Bodies are always buffered JSON, so one start and one body message
    are enough.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]
    raw_headers.append((b"content-length", str(len(response.body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": response.body,
        }
    )
