"""CLI entrypoint for running the Assembly Sync service."""
from __future__ import annotations

import argparse
import logging
import os

import uvicorn

from .config import env_bool, env_int

APP_IMPORT_PATH = "assembly_sync.main:app"


def main() -> None:
    """Parse CLI arguments and launch Uvicorn."""

    default_host = os.getenv("APP_HOST", "127.0.0.1")
    default_port = env_int("APP_PORT", 8000) or 8000
    default_reload = env_bool("APP_RELOAD", False)
    default_workers = env_int("APP_WORKERS")
    default_log_level = os.getenv("UVICORN_LOG_LEVEL", "info")

    parser = argparse.ArgumentParser(
        description=(
            "Run the Assembly Sync FastAPI service that segments production plans "
            "and synchronizes vehicle orders with the assembly suite."
        )
    )
    parser.add_argument(
        "--host",
        default=default_host,
        help=f"Host interface to bind (default: {default_host!r}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=default_port,
        help=f"Port to bind (default: {default_port}).",
    )
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help=f"Log level (default: {default_log_level}).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=default_workers,
        help=(
            "Number of worker processes (ignored when --reload is enabled). "
            + ("Default: APP_WORKERS env." if default_workers is not None else "Default: 1.")
        ),
    )
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        help="Enable auto-reload on code changes (defaults to APP_RELOAD env).",
    )
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        help="Disable auto-reload even if APP_RELOAD=1.",
    )
    parser.set_defaults(reload=default_reload)

    args = parser.parse_args()

    level = logging.DEBUG if args.log_level == "trace" else args.log_level.upper()
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    uvicorn.run(
        APP_IMPORT_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
