"""armadito-api CLI.

Entry point registered as ``armadito-api`` in ``pyproject.toml``::

    [project.scripts]
    armadito-api = "armadito_api.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``armadito-api`` command."""
    parser = argparse.ArgumentParser(
        prog="armadito-api",
        description="Armadito local API — HTTP control plane for the antivirus core.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- armadito-api run -------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the API server")
    run_parser.add_argument(
        "app",
        nargs="?",
        default=None,
        help="Import string (e.g. myapp:app); defaults to a LocalBackend app",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect)",
    )
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=("debug", "info", "warning", "error", "critical"),
        help="Server log level",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from armadito_api.cli._run import run_server

        run_server(args)
