"""Logging setup: stdlib and structlog both write to stderr."""

from __future__ import annotations

import logging
import sys

import structlog

# Indexed by the number of -v flags, capped at the last entry.
_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Route logs to stderr; stdout carries command output or MCP frames."""

    level = _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer()
            if json_mode
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
