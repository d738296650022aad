# src/insightwire/contracts/envelope.py
"""Wire contracts for envelopes sent to the ingestion service.

Field names are snake_case in Python. ``to_wire()`` renders the camelCase,
JSON-compatible shape the ingestion endpoint accepts. Optional fields that
are ``None`` are omitted from the wire shape.

Envelope and base data objects are mutable: the assembler builds a body,
merges common properties into it and then sanitizes them in place before
handing the envelope to the transport.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from insightwire.contracts.enums import DataPointType, SeverityLevel, TelemetryType


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass(slots=True)
class StackFrame:
    """One parsed frame of an exception stack.

    Attributes:
        level: Depth from the top of the stack (0-based)
        method: Function or method name
        assembly: The trimmed raw frame line
        file_name: Source file or location
        line: Line number (0 when unknown)
        size_in_bytes: Estimated serialized size, used only to bound the
            parsed stack. Not part of the wire shape.
    """

    level: int
    method: str
    assembly: str
    file_name: str
    line: int
    size_in_bytes: int = 0

    def to_wire(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "method": self.method,
            "assembly": self.assembly,
            "fileName": self.file_name,
            "line": self.line,
        }


@dataclass(slots=True)
class ExceptionDetails:
    """A single exception in an exception chain."""

    type_name: str
    message: str
    has_full_stack: bool = False
    parsed_stack: list[StackFrame] | None = None

    def to_wire(self) -> dict[str, Any]:
        parsed_stack = None
        if self.parsed_stack is not None:
            parsed_stack = [frame.to_wire() for frame in self.parsed_stack]
        return _compact(
            {
                "typeName": self.type_name,
                "message": self.message,
                "hasFullStack": self.has_full_stack,
                "parsedStack": parsed_stack,
            }
        )


@dataclass(slots=True)
class DataPoint:
    """A single metric value with optional aggregation statistics."""

    name: str
    value: float
    kind: DataPointType = DataPointType.MEASUREMENT
    count: int | None = None
    min: float | None = None
    max: float | None = None
    std_dev: float | None = None

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "kind": int(self.kind),
                "value": self.value,
                "count": self.count,
                "min": self.min,
                "max": self.max,
                "stdDev": self.std_dev,
            }
        )


@dataclass(slots=True)
class Domain:
    """Base class for base data bodies.

    Subclasses that carry custom dimensions set ``supports_properties``.
    """

    ver: int = 2

    supports_properties = False

    def to_wire(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(slots=True)
class MessageData(Domain):
    """Trace telemetry body."""

    message: str = ""
    severity_level: SeverityLevel = SeverityLevel.INFORMATION
    properties: dict[str, Any] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "message": self.message,
                "severityLevel": int(self.severity_level),
                "properties": self.properties,
            }
        )


@dataclass(slots=True)
class RemoteDependencyData(Domain):
    """Outbound dependency call body."""

    name: str = ""
    id: str | None = None
    result_code: str | None = None
    duration: str = "00:00:00"
    success: bool = True
    data: str | None = None
    target: str | None = None
    type: str | None = None
    properties: dict[str, Any] | None = None
    measurements: dict[str, float] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "name": self.name,
                "id": self.id,
                "resultCode": self.result_code,
                "duration": self.duration,
                "success": self.success,
                "data": self.data,
                "target": self.target,
                "type": self.type,
                "properties": self.properties,
                "measurements": self.measurements,
            }
        )


@dataclass(slots=True)
class EventData(Domain):
    """Custom event body."""

    name: str = ""
    properties: dict[str, Any] | None = None
    measurements: dict[str, float] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "name": self.name,
                "properties": self.properties,
                "measurements": self.measurements,
            }
        )


@dataclass(slots=True)
class ExceptionData(Domain):
    """Exception body."""

    exceptions: list[ExceptionDetails] = field(default_factory=list)
    severity_level: SeverityLevel = SeverityLevel.ERROR
    properties: dict[str, Any] | None = None
    measurements: dict[str, float] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "exceptions": [details.to_wire() for details in self.exceptions],
                "severityLevel": int(self.severity_level),
                "properties": self.properties,
                "measurements": self.measurements,
            }
        )


@dataclass(slots=True)
class RequestData(Domain):
    """Incoming request body."""

    id: str = ""
    name: str | None = None
    duration: str = "00:00:00"
    response_code: str = ""
    success: bool = True
    source: str | None = None
    url: str | None = None
    properties: dict[str, Any] | None = None
    measurements: dict[str, float] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "id": self.id,
                "name": self.name,
                "duration": self.duration,
                "responseCode": self.response_code,
                "success": self.success,
                "source": self.source,
                "url": self.url,
                "properties": self.properties,
                "measurements": self.measurements,
            }
        )


@dataclass(slots=True)
class MetricData(Domain):
    """Metric body. Carries one data point per envelope."""

    metrics: list[DataPoint] = field(default_factory=list)
    properties: dict[str, Any] | None = None

    supports_properties = True

    def to_wire(self) -> dict[str, Any]:
        return _compact(
            {
                "ver": self.ver,
                "metrics": [point.to_wire() for point in self.metrics],
                "properties": self.properties,
            }
        )


def domain_supports_properties(domain: Domain | None) -> bool:
    """Return True if the body can carry a custom property map."""
    return domain is not None and domain.supports_properties


@dataclass(slots=True)
class Data:
    """Discriminated payload of an envelope."""

    base_type: TelemetryType
    base_data: Domain

    def to_wire(self) -> dict[str, Any]:
        return {"baseType": str(self.base_type), "baseData": self.base_data.to_wire()}


@dataclass(slots=True)
class Envelope:
    """Canonical wire wrapper around one telemetry record.

    Attributes:
        name: ``Microsoft.ApplicationInsights.<ikey>.<ShortType>``
        time: Assembly time, ISO-8601 UTC
        i_key: Instrumentation key (may be empty)
        data: Typed payload
        tags: Context tags (operation ids, cloud role, ...)
        sample_rate: Percentage of telemetry retained (0-100)
        ver: Envelope schema version, always 1
    """

    name: str
    time: str
    i_key: str
    data: Data
    tags: dict[str, str] = field(default_factory=dict)
    sample_rate: float = 100
    ver: int = 1

    def to_wire(self) -> dict[str, Any]:
        """Render the JSON-compatible shape consumed by the transport."""
        return {
            "ver": self.ver,
            "name": self.name,
            "time": self.time,
            "iKey": self.i_key,
            "tags": dict(self.tags),
            "sampleRate": self.sample_rate,
            "data": self.data.to_wire(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"))
