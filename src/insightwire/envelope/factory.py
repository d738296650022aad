# src/insightwire/envelope/factory.py
"""Envelope assembly from telemetry records.

``create_envelope()`` is the single entry point. It dispatches on the
telemetry type to a pure converter that builds the typed body, merges
common properties into the body, sanitizes them, resolves tags and wraps
the result in an ``Envelope`` ready for the transport.

Converters never mutate the telemetry record. Property maps are copied
before merging so caller-owned dicts are left untouched.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from insightwire.contracts.enums import DataPointType, SeverityLevel, TelemetryType
from insightwire.contracts.envelope import (
    Data,
    DataPoint,
    Envelope,
    EventData,
    ExceptionData,
    ExceptionDetails,
    MessageData,
    MetricData,
    RemoteDependencyData,
    RequestData,
    domain_supports_properties,
)
from insightwire.contracts.errors import UnknownTelemetryTypeError
from insightwire.contracts.telemetry import (
    DependencyTelemetry,
    EventTelemetry,
    ExceptionTelemetry,
    MetricTelemetry,
    RequestTelemetry,
    Telemetry,
    TraceTelemetry,
)
from insightwire.envelope.sanitizer import validate_string_map
from insightwire.envelope.stack import parse_stack, stack_for_exception
from insightwire.envelope.tags import get_tags
from insightwire.envelope.timespan import ms_to_timespan

if TYPE_CHECKING:
    from insightwire.contracts.context import ClientContext, CorrelationContext
    from insightwire.core.config import TelemetryConfig

logger = structlog.get_logger(__name__)

ENVELOPE_NAME_PREFIX = "Microsoft.ApplicationInsights."


def _is_unset(value: Any) -> bool:
    """None and NaN both mean "not provided"."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _copy_properties(properties: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(properties) if properties is not None else None


def _copy_measurements(measurements: Mapping[str, float] | None) -> dict[str, float] | None:
    return dict(measurements) if measurements is not None else None


def _result_code(value: str | int | None) -> str | None:
    return None if value is None else str(value)


# =============================================================================
# Converters
# =============================================================================


def create_trace_data(telemetry: TraceTelemetry) -> Data:
    if _is_unset(telemetry.severity):
        severity = SeverityLevel.INFORMATION
    else:
        severity = SeverityLevel(int(telemetry.severity))  # type: ignore[arg-type]
    trace = MessageData(
        message=telemetry.message,
        severity_level=severity,
        properties=_copy_properties(telemetry.properties),
    )
    return Data(base_type=TelemetryType.MESSAGE, base_data=trace)


def create_dependency_data(telemetry: DependencyTelemetry) -> Data:
    remote_dependency = RemoteDependencyData(
        name=telemetry.name,
        id=telemetry.dependency_id,
        result_code=_result_code(telemetry.result_code),
        duration=ms_to_timespan(telemetry.duration),
        success=telemetry.success,
        data=telemetry.data,
        target=telemetry.target,
        type=telemetry.dependency_type_name,
        properties=_copy_properties(telemetry.properties),
        measurements=_copy_measurements(telemetry.measurements),
    )
    return Data(base_type=TelemetryType.REMOTE_DEPENDENCY, base_data=remote_dependency)


def create_event_data(telemetry: EventTelemetry) -> Data:
    event = EventData(
        name=telemetry.name,
        properties=_copy_properties(telemetry.properties),
        measurements=_copy_measurements(telemetry.measurements),
    )
    return Data(base_type=TelemetryType.EVENT, base_data=event)


def create_exception_data(telemetry: ExceptionTelemetry) -> Data:
    """Build an exception body.

    The stack comes from ``telemetry.stack`` when given, otherwise from the
    exception's own traceback. ``has_full_stack`` is True only when at least
    one frame was parsed.
    """
    exc = telemetry.exception
    stack = telemetry.stack if telemetry.stack is not None else stack_for_exception(exc)
    parsed_stack = parse_stack(stack)

    details = ExceptionDetails(
        type_name=type(exc).__name__,
        message=str(exc),
        parsed_stack=parsed_stack,
        has_full_stack=bool(parsed_stack),
    )
    exception = ExceptionData(
        exceptions=[details],
        severity_level=SeverityLevel.ERROR,
        properties=_copy_properties(telemetry.properties),
        measurements=_copy_measurements(telemetry.measurements),
    )
    return Data(base_type=TelemetryType.EXCEPTION, base_data=exception)


def create_request_data(telemetry: RequestTelemetry) -> Data:
    request = RequestData(
        id=telemetry.id,
        name=telemetry.name,
        url=telemetry.url,
        source=telemetry.source,
        duration=ms_to_timespan(telemetry.duration),
        response_code=str(telemetry.result_code),
        success=telemetry.success,
        properties=_copy_properties(telemetry.properties),
        measurements=_copy_measurements(telemetry.measurements),
    )
    return Data(base_type=TelemetryType.REQUEST, base_data=request)


def create_metric_data(telemetry: MetricTelemetry) -> Data:
    # TODO: batch several data points per MetricData once the transport aggregates client-side
    point = DataPoint(
        name=telemetry.name,
        value=telemetry.value,
        kind=DataPointType.AGGREGATION,
        count=1 if _is_unset(telemetry.count) else int(telemetry.count),  # type: ignore[arg-type]
        min=telemetry.value if _is_unset(telemetry.min) else telemetry.min,
        max=telemetry.value if _is_unset(telemetry.max) else telemetry.max,
        std_dev=0 if _is_unset(telemetry.std_dev) else telemetry.std_dev,
    )
    metrics = MetricData(metrics=[point], properties=_copy_properties(telemetry.properties))
    return Data(base_type=TelemetryType.METRIC, base_data=metrics)


def _convert(telemetry: Telemetry, telemetry_type: TelemetryType) -> Data:
    match telemetry_type, telemetry:
        case TelemetryType.MESSAGE, TraceTelemetry():
            return create_trace_data(telemetry)
        case TelemetryType.REMOTE_DEPENDENCY, DependencyTelemetry():
            return create_dependency_data(telemetry)
        case TelemetryType.EVENT, EventTelemetry():
            return create_event_data(telemetry)
        case TelemetryType.EXCEPTION, ExceptionTelemetry():
            return create_exception_data(telemetry)
        case TelemetryType.REQUEST, RequestTelemetry():
            return create_request_data(telemetry)
        case TelemetryType.METRIC, MetricTelemetry():
            return create_metric_data(telemetry)
        case _:
            raise UnknownTelemetryTypeError(
                telemetry_type,
                f"Telemetry type {telemetry_type.value!r} does not accept {type(telemetry).__name__}",
            )


# =============================================================================
# Assembly
# =============================================================================


def merge_common_properties(
    properties: dict[str, Any] | None,
    common_properties: Mapping[str, Any] | None,
) -> dict[str, Any] | None:
    """Merge client-wide properties under the body's own properties.

    A key already set on the body (non-empty) is never overwritten.
    """
    if not common_properties:
        return properties
    if not properties:
        return dict(common_properties)

    merged = dict(properties)
    for name, value in common_properties.items():
        if merged.get(name) in (None, ""):
            merged[name] = value
    return merged


def envelope_name(i_key: str, base_type: TelemetryType | str) -> str:
    """``Microsoft.ApplicationInsights.<ikey sans dashes>.<base type sans 'Data'>``"""
    base_type = str(base_type)
    return f"{ENVELOPE_NAME_PREFIX}{i_key.replace('-', '')}.{base_type[:-4]}"


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_envelope(
    telemetry: Telemetry,
    telemetry_type: TelemetryType | str,
    common_properties: Mapping[str, Any] | None = None,
    context: ClientContext | None = None,
    config: TelemetryConfig | None = None,
    *,
    correlation_context: CorrelationContext | None = None,
) -> Envelope:
    """Create an envelope ready to be sent by the transport.

    Args:
        telemetry: Telemetry record to convert
        telemetry_type: Variant discriminator (a ``TelemetryType`` or its
            string value, e.g. ``"MessageData"``)
        common_properties: Client-wide custom properties, merged under the
            record's own properties
        context: Client context supplying default tags
        config: Client configuration (instrumentation key, sampling rate)
        correlation_context: The operation currently executing, if any

    Returns:
        A new Envelope

    Raises:
        UnknownTelemetryTypeError: If the type is not recognized or does
            not match the telemetry record's class
    """
    try:
        resolved_type = TelemetryType(telemetry_type)
    except ValueError as e:
        raise UnknownTelemetryTypeError(telemetry_type) from e

    data = _convert(telemetry, resolved_type)

    body = data.base_data
    if domain_supports_properties(body):
        merged = merge_common_properties(body.properties, common_properties)  # type: ignore[attr-defined]
        body.properties = validate_string_map(merged)  # type: ignore[attr-defined]

    i_key = config.instrumentation_key if config is not None else ""
    envelope = Envelope(
        name=envelope_name(i_key, data.base_type),
        time=_now_iso(),
        i_key=i_key,
        data=data,
        tags=get_tags(context, telemetry.tag_overrides, correlation_context),
        sample_rate=config.sampling_percentage if config is not None else 100,
        ver=1,
    )
    logger.debug(
        "Envelope created",
        base_type=str(data.base_type),
        tag_count=len(envelope.tags),
    )
    return envelope
