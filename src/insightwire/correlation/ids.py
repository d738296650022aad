# src/insightwire/correlation/ids.py
"""W3C trace context identifiers."""

import uuid

_INVALID_TRACE_ID = "0" * 32


def w3c_trace_id() -> str:
    """Generate a W3C-compatible trace id.

    A version 4 UUID rendered as 32 lowercase hex digits without dashes.
    """
    return uuid.uuid4().hex


def is_valid_w3c_id(value: str) -> bool:
    """A trace id is valid when it has 32 characters and is not all zeros."""
    return len(value) == 32 and value != _INVALID_TRACE_ID
