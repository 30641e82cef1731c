"""Request headers as seen by the precondition pipeline.

Only single-value lookups are ever made (``User-Agent``, the token
header, ``Content-Type``), so names are folded to lower case once at
construction and a repeated header keeps its first value.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

HeaderSource: TypeAlias = Mapping[str, str] | Iterable[tuple[str, str]] | Iterable[tuple[bytes, bytes]]


def _text(value: str | bytes) -> str:
    # ASGI delivers header bytes; HTTP/1.1 field values are latin-1.
    return value.decode("latin-1") if isinstance(value, bytes) else value


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive request headers.

    An empty value still counts as present: ``"user-agent" in headers``
    is true for ``User-Agent:`` with nothing after the colon.
    """

    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str | bytes, str | bytes]] = ()) -> None:
        values: dict[str, str] = {}
        for name, value in pairs:
            values.setdefault(_text(name).lower(), _text(value))
        self._values = values

    @classmethod
    def coerce(cls, source: "Headers | HeaderSource | None") -> "Headers":
        """Build Headers from a mapping, string pairs, or raw ASGI byte pairs."""
        if source is None:
            return cls()
        if isinstance(source, Headers):
            return source
        if isinstance(source, Mapping):
            return cls(source.items())
        return cls(source)

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"
