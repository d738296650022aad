# src/insightwire/core/logging.py
"""Structured logging configuration for insightwire.

Library modules log through ``structlog.get_logger(__name__)`` and never
configure output themselves. Host applications (or tests) call
``configure_logging()`` once to choose the renderer and destination.

Both structlog events and stdlib records (httpx, httpcore) are routed
through ``ProcessorFormatter``, so a single handler renders everything in
one format with the emitting logger's name attached.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# HTTP client internals emit connection details for every call.
_NOISY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "urllib3",
)


def _drop_formatter_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """ProcessorFormatter always adds ``_record`` and ``_from_structlog``."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        _drop_formatter_fields,
        structlog.dev.ConsoleRenderer(colors=False),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        json_output: If True, one JSON object per line. If False, console
            key=value output.
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        stream: Destination, ``sys.stderr`` by default.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created before this call
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_renderers(json_output),
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    # Never more verbose than WARNING, and never more verbose than root
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))
