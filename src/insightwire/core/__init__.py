# src/insightwire/core/__init__.py
"""Core infrastructure: configuration, logging and small helpers."""

from insightwire.core.config import TelemetryConfig, parse_connection_string
from insightwire.core.cookies import get_cookie
from insightwire.core.logging import configure_logging

__all__ = [
    "TelemetryConfig",
    "configure_logging",
    "get_cookie",
    "parse_connection_string",
]
