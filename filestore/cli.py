"""Command line entry point.

    filestore --cfg config.yaml --port 8080
"""

from __future__ import annotations

import argparse
import sys

import structlog
import uvicorn

from filestore.config import get_settings, load_settings
from filestore.errors import ConfigError
from filestore.logs import configure_logging
from filestore.main import create_app

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filestore",
        description="Token-authenticated upload receiver and static file server",
    )
    parser.add_argument("--cfg", help="Configuration file (YAML)")
    parser.add_argument("--host", help="Listen address")
    parser.add_argument("--port", type=int, help="Port number")
    parser.add_argument(
        "--log",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load configuration and serve until interrupted.

    Returns the process exit code; configuration errors return 1 before
    anything is served.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.cfg) if args.cfg else get_settings()
    except ConfigError as e:
        print(f"filestore: {e}", file=sys.stderr)
        return 1

    log_config = settings.logging
    if args.log is not None:
        log_config = log_config.model_copy(update={"enabled": args.log})
    configure_logging(log_config)

    host = args.host or settings.server.host
    port = args.port or settings.server.port

    app = create_app(settings)
    logger.info("server.listening", host=host, port=port)
    uvicorn.run(
        app,
        host=host,
        port=port,
        access_log=log_config.enabled and log_config.access_log,
        log_level=log_config.level if log_config.enabled else "critical",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
