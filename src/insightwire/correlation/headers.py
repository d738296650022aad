# src/insightwire/correlation/headers.py
"""The ``request-context`` correlation header.

The header carries comma-separated ``key=value`` components. One reserved
component, ``appId=<correlation id>``, names the service that emitted the
call. Propagation is append-only: if a source component is already present
it is never replaced, so the first writer wins and repeated calls never add
a second one.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from insightwire.core.config import TelemetryConfig

logger = structlog.get_logger(__name__)

REQUEST_CONTEXT_HEADER = "request-context"
REQUEST_CONTEXT_SOURCE_KEY = "appId"


class SupportsHeaders(Protocol):
    """Anything with a mutable header mapping (httpx.Request, OutboundRequest, ...)."""

    @property
    def headers(self) -> MutableMapping[str, str]: ...


def source_component(correlation_id: str) -> str:
    return f"{REQUEST_CONTEXT_SOURCE_KEY}={correlation_id}"


def _value_to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def coerce_header_value(raw_header_value: Any) -> str | None:
    """Turn a raw header value into a string, or None when unusable.

    Accepts None, ``str``, ``bytes``, a list/tuple of values (joined with
    commas) or any object with a working ``__str__``. Blank values count as
    absent.
    """
    if raw_header_value is None:
        return None

    try:
        if isinstance(raw_header_value, str):
            header = raw_header_value
        elif isinstance(raw_header_value, bytes):
            header = raw_header_value.decode("latin-1")
        elif isinstance(raw_header_value, list | tuple):
            header = ",".join(_value_to_str(value) for value in raw_header_value)
        else:
            header = str(raw_header_value)
    except Exception as e:
        # Best effort only - a broken __str__ must not fail the outbound call
        logger.warning(
            "Outgoing request-context header could not be read. Correlation of requests may be lost.",
            error=str(e),
            header_type=type(raw_header_value).__name__,
            header_value=object.__repr__(raw_header_value),
        )
        return None

    if not header.strip():
        return None
    return header


def has_source_component(header: str) -> bool:
    prefix = f"{REQUEST_CONTEXT_SOURCE_KEY}="
    return any(component.strip().startswith(prefix) for component in header.split(","))


def merge_correlation_header(header: str, correlation_id: str) -> str:
    """Append the source component unless one is already present."""
    if has_source_component(header):
        return header
    return f"{header},{source_component(correlation_id)}"


def attach_correlation_header(
    config: TelemetryConfig,
    request: SupportsHeaders,
    raw_header_value: Any = None,
) -> None:
    """Set or merge the ``request-context`` header on an outbound request.

    Args:
        config: Supplies the correlation id of this service
        request: Request (or response) whose headers are updated in place
        raw_header_value: The existing header value in any form. Absent or
            unreadable values are replaced by a lone source component.
    """
    header = coerce_header_value(raw_header_value)
    if header is None:
        request.headers[REQUEST_CONTEXT_HEADER] = source_component(config.correlation_id)
        return

    if not has_source_component(header):
        request.headers[REQUEST_CONTEXT_HEADER] = merge_correlation_header(header, config.correlation_id)
