"""``/scan`` — on-demand scan request, the only endpoint with a body."""

import logging
from typing import Any

from armadito_api.endpoints.session import TOKEN_NOT_REGISTERED, resolve_client
from armadito_api.errors import BackendError
from armadito_api.routing.endpoint import ProcessResult, RequestContext

logger = logging.getLogger("armadito_api.endpoints")


class ScanHandler:
    """Start a scan of ``document["path"]`` for the requesting client.

    Expects a body like ``{"path": "/home/user/Downloads"}``.
    """

    def check(self, ctx: RequestContext, document: Any) -> bool:
        """Reject anything but an object with a non-empty string ``path``."""
        if not isinstance(document, dict):
            return True
        path = document.get("path")
        return not isinstance(path, str) or not path

    def process(self, ctx: RequestContext, document: Any, user_data: Any) -> ProcessResult:
        client = resolve_client(ctx)
        if client is None:
            return ProcessResult.failure(dict(TOKEN_NOT_REGISTERED))

        path = document["path"]
        try:
            extra = user_data.scan(path, client)
        except BackendError as exc:
            logger.warning("scan of %s failed: %s", path, exc)
            return ProcessResult.failure({"error": str(exc)})

        return ProcessResult.success({**(extra or {}), "status": "scan started", "path": path})
