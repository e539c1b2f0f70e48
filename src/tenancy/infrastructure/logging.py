"""Structlog configuration for hosts embedding the tenancy package.

The package itself only emits events through its probes; hosts call
``configure_logging`` once at startup to choose how those events render.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def _wants_colors() -> bool:
    if os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes"):
        return True
    return sys.stdout.isatty()


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    level: int = logging.NOTSET, json_output: bool | None = None
) -> None:
    """Configure structlog for tenancy probe events.

    Args:
        level: Minimum stdlib log level to emit; ``logging.WARNING`` hides
            per-switch debug and info events in busy workers
        json_output: Force JSON (True) or colored console (False) output.
            When None, colors are used for a TTY or when FORCE_COLOR is set.
    """
    if json_output is None:
        json_output = not _wants_colors()

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        *_renderer(json_output),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
