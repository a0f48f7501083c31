"""Structured logging utility with cycle ID support."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Generator

import structlog

# Context variable for the state cycle currently being driven
cycle_id_var: ContextVar[str] = ContextVar("cycle_id", default="")

PAYLOAD_SUMMARY_LENGTH = 16


def get_cycle_id() -> str:
    """Get the cycle ID bound to the current context, or an empty string."""
    return cycle_id_var.get()


@contextmanager
def bind_cycle_id(cycle_id: Any) -> Generator[None, None, None]:
    """
    Bind a cycle ID to every log event emitted inside the block.

    Args:
        cycle_id: Identifier of the state cycle
    """
    token = cycle_id_var.set(str(cycle_id))
    try:
        yield
    finally:
        cycle_id_var.reset(token)


def payload_summary(payload: Any) -> str:
    """Short printable form of a payload for log lines."""
    if payload is None:
        return "null"
    text = str(payload)
    return text[:PAYLOAD_SUMMARY_LENGTH]


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add the bound cycle ID to log events."""
    cid = cycle_id_var.get()
    if cid:
        event_dict.setdefault("cycle_id", cid)
    return event_dict


def add_timestamp(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add ISO format timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def configure_logging(
    level: str = "info",
    format_type: str = "json",
    stream: Any = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (debug, info, warn, error)
        format_type: Output format ('json' or 'text')
        stream: Output stream (default: sys.stderr)
    """
    if stream is None:
        stream = sys.stderr

    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    log_level = level_map.get(level.lower(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
    )

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_context_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Optional logger name for context

    Returns:
        Lazy structlog logger, resolved against the configuration in
        effect at its first use
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
