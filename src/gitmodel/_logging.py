"""structlog loggers for git command tracing.

Loggers built here are wrapped individually with structlog.wrap_logger, so
the global structlog configuration of a host application stays untouched.
"""

import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, cast

import structlog

from gitmodel.config import LogFormat, LoggingSettings

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor


def _log_level_from_string(level: str) -> int:
    """Resolve the numeric threshold for a level name.

    GITMODEL_DEBUG forces DEBUG. An empty `level` defers to
    GITMODEL_LOG_LEVEL; unknown names resolve to WARNING.
    """
    if getenv("GITMODEL_DEBUG", None):
        return logging.DEBUG

    name = (level or getenv("GITMODEL_LOG_LEVEL", "warning")).upper()
    return logging.getLevelNamesMapping().get(name, logging.WARNING)


def _renderers(log_format: LogFormat | str) -> "list[Processor]":  # noqa: UP037
    if log_format == LogFormat.JSON:
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def create_logger(
    *,
    level: str = "",
    log_format: LogFormat | str = LogFormat.TEXT,
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Build a standalone logger.

    Args:
        level: Threshold name (debug, info, warning, error). Empty defers to
            the environment.
        log_format: "json" for one object per line, "text" for
            "timestamp [level] event key=value" lines.
        log_file: File to append to; its parent directories are created.
            Empty writes to stderr.

    Returns:
        A FilteringBoundLogger dropping events below the threshold.
    """
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        sink = structlog.WriteLogger(file=path.open("a"))
    else:
        sink = structlog.PrintLogger(file=sys.stderr)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            sink,
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                *_renderers(log_format),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(
                _log_level_from_string(level)
            ),
            context_class=dict,
        ),
    )


def create_logger_from_settings(
    settings: LoggingSettings,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Build a logger from the `logging` settings table."""
    return create_logger(
        level=settings.level.value if settings.level else "",
        log_format=settings.format,
        log_file=settings.file,
    )
