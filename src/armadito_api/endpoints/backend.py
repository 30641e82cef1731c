"""Backend protocol — the antivirus core the endpoints delegate to.

The dispatcher hands the backend to every process callback as its user
data. Bring your own implementation; ``LocalBackend`` is a small
in-process one used by the default app and the test-suite.
"""

import threading
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from armadito_api.clients import ApiClient
from armadito_api.errors import BackendError


@runtime_checkable
class Backend(Protocol):
    """What the ``/scan``, ``/status`` and ``/version`` endpoints need."""

    def scan(self, path: str, client: ApiClient) -> Mapping[str, Any] | None: ...

    def status(self) -> Mapping[str, Any]: ...

    def version(self) -> str: ...


class LocalBackend:
    """In-process backend that completes scans immediately.

    Each scan pushes an ``OnDemandCompletedEvent`` onto the requesting
    client's event queue, where ``/event`` picks it up.
    """

    __slots__ = ("_lock", "_scans", "_version")

    def __init__(self, version: str = "0.1.0") -> None:
        self._version = version
        self._lock = threading.Lock()
        self._scans: list[str] = []

    @property
    def scans(self) -> list[str]:
        with self._lock:
            return list(self._scans)

    def scan(self, path: str, client: ApiClient) -> Mapping[str, Any] | None:
        if "\x00" in path:
            msg = "scan path contains a NUL byte"
            raise BackendError(msg)
        with self._lock:
            self._scans.append(path)
            scan_id = len(self._scans)
        client.push_event(
            {
                "event_type": "OnDemandCompletedEvent",
                "scan_id": scan_id,
                "path": path,
                "total_malware_count": 0,
                "total_suspicious_count": 0,
                "total_scanned_count": 0,
            }
        )
        return {"scan_id": scan_id}

    def status(self) -> Mapping[str, Any]:
        return {"global_status": "ok", "scans": len(self.scans)}

    def version(self) -> str:
        return self._version
