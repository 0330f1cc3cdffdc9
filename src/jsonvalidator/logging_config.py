"""Rendering of the library's stdlib log records for the CLI."""

import logging
import sys

import structlog

# loggers the CLI may raise above the requested level
NOISY_LOGGERS = ("httpx", "httpcore")


def _record_processors(json_output: bool) -> list:
    """Processors applied to every stdlib record before rendering."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if json_output:
        # console lines are read live, JSON lines are collected
        processors.append(structlog.processors.TimeStamper(fmt="iso", key="ts"))
    return processors


def configure_logging(log_level: str = "warning", json_output: bool = False) -> None:
    """Send log records to stderr through a structlog formatter.

    The library only logs through ``logging.getLogger(__name__)``, so only the
    formatter side of structlog is set up.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=_record_processors(json_output),
    )

    # stdout carries validation output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_load_context(source: str, **extra: str) -> None:
    """Bind the schema source (and any extra fields) to subsequent log records."""
    structlog.contextvars.bind_contextvars(source=source, **extra)


def clear_load_context() -> None:
    structlog.contextvars.clear_contextvars()
