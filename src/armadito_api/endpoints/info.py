"""Read-only endpoints: ``/status``, ``/browse``, ``/version``."""

import logging
from pathlib import Path
from typing import Any

from armadito_api.config import API_VERSION
from armadito_api.errors import BackendError
from armadito_api.routing.endpoint import ProcessResult, RequestContext

logger = logging.getLogger("armadito_api.endpoints")


class StatusHandler:
    check = None

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        try:
            return ProcessResult.success(dict(user_data.status()))
        except BackendError as exc:
            return ProcessResult.failure({"error": str(exc)})


class VersionHandler:
    check = None

    def __init__(self, api_version: str = API_VERSION) -> None:
        self.api_version = api_version

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        return ProcessResult.success(
            {"version": user_data.version(), "api-version": self.api_version}
        )


def _entry_type(entry: Path) -> str:
    if entry.is_symlink():
        return "link"
    if entry.is_dir():
        return "dir"
    if entry.is_file():
        return "file"
    return "other"


class BrowseHandler:
    """List a local directory so a UI can pick scan targets.

    The directory comes from the ``path`` query argument (default ``/``).
    """

    check = None

    def __init__(self, default_path: str = "/") -> None:
        self.default_path = default_path

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        directory = Path(ctx.request.argument("path") or self.default_path)
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
            content = [{"name": entry.name, "type": _entry_type(entry)} for entry in entries]
        except OSError as exc:
            logger.warning("cannot browse %s: %s", directory, exc)
            return ProcessResult.failure(
                {"error": f"cannot browse {directory}", "reason": exc.strerror or str(exc)}
            )
        return ProcessResult.success({"path": str(directory), "content": content})
