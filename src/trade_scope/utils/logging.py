"""Structured logging setup.

structlog on top of the stdlib logging module, rendering either JSON or
coloured console lines. Output goes to stderr so exported data written to
stdout stays clean.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from trade_scope.config import LogFormat, get_settings


def setup_logging() -> None:
    """Configure structlog from settings."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    shared_processors: list[Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == LogFormat.JSON:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger.

    Args:
        name: Logger name. Defaults to the calling module.

    Returns:
        Bound structlog logger.
    """
    return structlog.get_logger(name)


def log_row_error(
    logger: structlog.stdlib.BoundLogger,
    *,
    setup: str,
    stop_type: str,
    error: str,
    **kwargs: Any,
) -> None:
    """Record a grid row that produced no result."""
    logger.warning(
        "trade_row_failed",
        setup=setup,
        stop_type=stop_type,
        error=error,
        **kwargs,
    )


def log_calculation(
    logger: structlog.stdlib.BoundLogger,
    *,
    setup: str,
    stop_type: str,
    quantity: float,
    warnings: list[str],
    **kwargs: Any,
) -> None:
    """Record one computed grid row."""
    logger.debug(
        "trade_row_computed",
        setup=setup,
        stop_type=stop_type,
        quantity=quantity,
        warnings=warnings,
        **kwargs,
    )


def log_export(
    logger: structlog.stdlib.BoundLogger,
    *,
    fmt: str,
    rows: int,
    path: str | None = None,
    **kwargs: Any,
) -> None:
    """Record an export of result rows."""
    logger.info(
        "results_exported",
        format=fmt,
        rows=rows,
        path=path,
        **kwargs,
    )
