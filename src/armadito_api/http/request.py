"""Immutable API request.

Everything the dispatcher consumes from the transport: method, path,
headers, query arguments and the fully buffered body.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs

from armadito_api.config import API_TOKEN_HEADER
from armadito_api.http.headers import HeaderSource, Headers


def _parse_arguments(query_string: bytes | str) -> MappingProxyType[str, str]:
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")
    parsed = parse_qs(query_string, keep_blank_values=True)
    return MappingProxyType({key: values[0] for key, values in parsed.items()})


@dataclass(frozen=True, slots=True)
class ApiRequest:
    """An immutable HTTP request with a buffered body.

    Query arguments keep the first value of each key, like a
    connection-value lookup on the transport.
    """

    method: str
    path: str
    headers: Headers
    body: bytes = b""
    arguments: MappingProxyType[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    token_header: str = API_TOKEN_HEADER

    # -- Computed properties --

    @property
    def user_agent(self) -> str | None:
        """The User-Agent header value."""
        return self.headers.get("user-agent")

    @property
    def token(self) -> str | None:
        """The API token header value, or None when absent."""
        return self.headers.get(self.token_header)

    @property
    def content_type(self) -> str | None:
        """The Content-Type media type, parameters after ``;`` removed."""
        value = self.headers.get("content-type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip()

    def argument(self, key: str, default: str | None = None) -> str | None:
        """Return the query argument *key*, or *default* if missing."""
        return self.arguments.get(key, default)

    # -- Factory --

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Headers | HeaderSource | None = None,
        body: bytes | str | None = None,
        *,
        query: bytes | str = b"",
        token_header: str = API_TOKEN_HEADER,
    ) -> "ApiRequest":
        """Create an ApiRequest from loosely typed transport values.

        A ``?query`` suffix on *path* is split off and merged with *query*.
        """
        if "?" in path:
            path, inline_query = path.split("?", 1)
            query = f"{_as_text(query)}&{inline_query}" if query else inline_query
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            method=method.upper(),
            path=path,
            headers=Headers.coerce(headers),
            body=body or b"",
            arguments=_parse_arguments(query),
            token_header=token_header,
        )


def _as_text(value: Any) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else str(value)
