"""structlog setup for the service and CLI."""

from __future__ import annotations

import logging
import sys

import structlog

from filestore.config import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def drop_event(logger, method_name, event_dict):
    raise structlog.DropEvent


def configure_logging(config: LoggingConfig) -> None:
    """Configure structlog from the logging section of the settings.

    Disabled logging keeps the same configuration shape but drops every event.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    if config.enabled:
        level = _LEVELS[config.level]
    else:
        level = logging.CRITICAL
        processors.insert(0, drop_event)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
