# src/insightwire/contracts/telemetry.py
"""In-process telemetry records.

Callers create one of these per emitted item and hand it to
``create_envelope()``. Records are transient: each is converted into
exactly one envelope and then discarded.

Numeric fields that callers may leave unset (severity, count, min, max,
std_dev) accept ``None`` or NaN as the unset sentinel. The assembler
substitutes documented defaults for either.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from insightwire.contracts.enums import SeverityLevel


@dataclass(slots=True, kw_only=True)
class Telemetry:
    """Fields shared by every telemetry variant.

    Attributes:
        properties: Custom dimensions. Values of any type are sanitized to
            strings during assembly.
        tag_overrides: Tags that take precedence over the client context
            defaults and the ambient correlation context.
    """

    properties: Mapping[str, Any] | None = None
    tag_overrides: dict[str, str] | None = None


@dataclass(slots=True, kw_only=True)
class TraceTelemetry(Telemetry):
    """A log message."""

    message: str
    severity: SeverityLevel | float | None = None


@dataclass(slots=True, kw_only=True)
class DependencyTelemetry(Telemetry):
    """An outbound call to a remote dependency.

    Attributes:
        duration: Elapsed time in milliseconds
        dependency_type_name: Kind of dependency (``HTTP``, ``SQL``, ...)
    """

    name: str
    data: str | None = None
    target: str | None = None
    duration: float = 0
    success: bool = True
    dependency_type_name: str | None = None
    result_code: str | int | None = None
    dependency_id: str | None = None
    measurements: dict[str, float] | None = None


@dataclass(slots=True, kw_only=True)
class EventTelemetry(Telemetry):
    """A named custom event."""

    name: str
    measurements: dict[str, float] | None = None


@dataclass(slots=True, kw_only=True)
class ExceptionTelemetry(Telemetry):
    """A raised or constructed exception.

    Attributes:
        exception: The exception object. Its message and type name are
            reported directly.
        stack: Raw stack text. When omitted the exception's own traceback
            is rendered.
    """

    exception: BaseException
    stack: str | None = None
    measurements: dict[str, float] | None = None


@dataclass(slots=True, kw_only=True)
class RequestTelemetry(Telemetry):
    """An incoming request handled by this process.

    Attributes:
        duration: Elapsed time in milliseconds
        source: Correlation id of the calling service, if known
    """

    id: str
    name: str
    url: str | None = None
    source: str | None = None
    duration: float = 0
    result_code: str | int = ""
    success: bool = True
    measurements: dict[str, float] | None = None


@dataclass(slots=True, kw_only=True)
class MetricTelemetry(Telemetry):
    """A metric sample or pre-aggregated series."""

    name: str
    value: float
    count: int | float | None = None
    min: float | None = None
    max: float | None = None
    std_dev: float | None = None


__all__ = [
    "DependencyTelemetry",
    "EventTelemetry",
    "ExceptionTelemetry",
    "MetricTelemetry",
    "RequestTelemetry",
    "Telemetry",
    "TraceTelemetry",
]
