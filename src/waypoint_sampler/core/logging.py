"""
Structured logging for waypoint_sampler.

Samplers are called many times per planning run, so they only log at DEBUG
level with key/value stage counts. structlog renders those events either as
colored console lines or as JSON lines.

Usage::

    from waypoint_sampler.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")  # once, in the process that owns the samplers
    logger = get_logger(__name__)
    logger.debug("waypoint_sampled", poses=36, returned=4)
"""

import logging
import sys
from typing import Optional

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for every sampler in the process.

    Call this once, from whatever owns the samplers (the CLI entry point,
    or the planner process that runs the graph search). Library code only
    calls ``get_logger``; until this runs, structlog's defaults apply.

    Events are routed through the stdlib ``logging`` handlers, so the level
    filter and the optional log file behave as for any other stdlib logger.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Sampler stage counts are logged at DEBUG.
        json_output: If True, output JSON lines (for log aggregation across
                     many planning runs). If False, output colored
                     console-friendly lines (interactive use).
        log_file: Optional path to write logs to a file in addition to stderr.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


def waypoint_context(**values):
    """
    Bind key/values to every event logged in the current context.

    Used by the batch runner so that each sampler's events carry the index
    of the waypoint it belongs to::

        with waypoint_context(waypoint=3):
            sampler.sample()
    """
    return structlog.contextvars.bound_contextvars(**values)
