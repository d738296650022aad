"""
insightwire: telemetry envelope assembly and correlation propagation.

Converts in-process telemetry records into ingestion envelopes and carries
correlation identifiers across outbound HTTP calls.
"""

__version__ = "0.1.0"

from insightwire.contracts import (
    ClientContext,
    CorrelationContext,
    DependencyTelemetry,
    Envelope,
    EventTelemetry,
    ExceptionTelemetry,
    MetricTelemetry,
    Operation,
    RequestTelemetry,
    SeverityLevel,
    TelemetryType,
    TraceTelemetry,
    UnknownTelemetryTypeError,
)
from insightwire.core import TelemetryConfig, configure_logging
from insightwire.correlation import CorrelationPropagator
from insightwire.envelope import create_envelope

__all__ = [
    "ClientContext",
    "CorrelationContext",
    "CorrelationPropagator",
    "DependencyTelemetry",
    "Envelope",
    "EventTelemetry",
    "ExceptionTelemetry",
    "MetricTelemetry",
    "Operation",
    "RequestTelemetry",
    "SeverityLevel",
    "TelemetryConfig",
    "TelemetryType",
    "TraceTelemetry",
    "UnknownTelemetryTypeError",
    "__version__",
    "configure_logging",
    "create_envelope",
]
