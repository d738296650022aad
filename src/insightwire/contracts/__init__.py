# src/insightwire/contracts/__init__.py
"""Shared contracts: telemetry records, wire envelopes, context and errors.

This is a leaf package. It must not import from ``insightwire.envelope``
or ``insightwire.correlation``.
"""

from insightwire.contracts.context import (
    ClientContext,
    ContextTagKeys,
    CorrelationContext,
    Operation,
)
from insightwire.contracts.enums import DataPointType, SeverityLevel, TelemetryType
from insightwire.contracts.envelope import (
    Data,
    DataPoint,
    Domain,
    Envelope,
    EventData,
    ExceptionData,
    ExceptionDetails,
    MessageData,
    MetricData,
    RemoteDependencyData,
    RequestData,
    StackFrame,
    domain_supports_properties,
)
from insightwire.contracts.errors import (
    ConfigurationError,
    InsightwireError,
    InvalidRequestUrlError,
    UnknownTelemetryTypeError,
)
from insightwire.contracts.telemetry import (
    DependencyTelemetry,
    EventTelemetry,
    ExceptionTelemetry,
    MetricTelemetry,
    RequestTelemetry,
    Telemetry,
    TraceTelemetry,
)

__all__ = [
    "ClientContext",
    "ConfigurationError",
    "ContextTagKeys",
    "CorrelationContext",
    "Data",
    "DataPoint",
    "DataPointType",
    "DependencyTelemetry",
    "Domain",
    "Envelope",
    "EventData",
    "EventTelemetry",
    "ExceptionData",
    "ExceptionDetails",
    "ExceptionTelemetry",
    "InsightwireError",
    "InvalidRequestUrlError",
    "MessageData",
    "MetricData",
    "MetricTelemetry",
    "Operation",
    "RemoteDependencyData",
    "RequestData",
    "RequestTelemetry",
    "SeverityLevel",
    "StackFrame",
    "Telemetry",
    "TelemetryType",
    "TraceTelemetry",
    "UnknownTelemetryTypeError",
    "domain_supports_properties",
]
