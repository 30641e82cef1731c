"""``armadito-api run`` — start the API server.

Resolves an import string to an ApiApp and starts pounce with it. CLI
flags override the app's configuration.
"""

import argparse
import sys

from armadito_api.cli._resolve import resolve_app
from armadito_api.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Start the API server for ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from armadito_api.server.runner import run_server as _run

    config = app.config
    try:
        _run(
            app,
            host=args.host or config.host,
            port=args.port or config.port,
            workers=args.workers if args.workers is not None else config.workers,
            log_level=args.log_level or ("debug" if config.debug else config.log_level),
            keep_alive_timeout=config.keep_alive_timeout,
            request_timeout=config.request_timeout,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
