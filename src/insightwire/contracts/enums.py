# src/insightwire/contracts/enums.py
"""Enumerations shared by the envelope contracts."""

from enum import IntEnum, StrEnum


class TelemetryType(StrEnum):
    """Discriminator for telemetry variants.

    Values double as the envelope ``data.baseType``. Stripping the trailing
    ``Data`` yields the short envelope name (``MessageData`` -> ``Message``).
    """

    MESSAGE = "MessageData"
    REMOTE_DEPENDENCY = "RemoteDependencyData"
    EVENT = "EventData"
    EXCEPTION = "ExceptionData"
    REQUEST = "RequestData"
    METRIC = "MetricData"


class SeverityLevel(IntEnum):
    """Severity of trace and exception telemetry."""

    VERBOSE = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


class DataPointType(IntEnum):
    """Kind of metric data point."""

    MEASUREMENT = 0
    AGGREGATION = 1
