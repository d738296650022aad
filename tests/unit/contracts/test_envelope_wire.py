# tests/unit/contracts/test_envelope_wire.py
"""Tests for envelope contracts, client context and errors."""

import json
import socket

from insightwire.contracts import (
    ClientContext,
    ContextTagKeys,
    Data,
    Domain,
    Envelope,
    EventData,
    ExceptionDetails,
    MessageData,
    MetricData,
    StackFrame,
    TelemetryType,
    UnknownTelemetryTypeError,
    domain_supports_properties,
)


def _envelope() -> Envelope:
    return Envelope(
        name="Microsoft.ApplicationInsights.abc.Event",
        time="2026-01-15T10:00:00.000Z",
        i_key="abc",
        data=Data(base_type=TelemetryType.EVENT, base_data=EventData(name="OrderPlaced")),
        tags={"ai.cloud.role": "checkout"},
        sample_rate=25,
    )


class TestWireShape:
    def test_envelope_to_wire(self) -> None:
        assert _envelope().to_wire() == {
            "ver": 1,
            "name": "Microsoft.ApplicationInsights.abc.Event",
            "time": "2026-01-15T10:00:00.000Z",
            "iKey": "abc",
            "tags": {"ai.cloud.role": "checkout"},
            "sampleRate": 25,
            "data": {"baseType": "EventData", "baseData": {"ver": 2, "name": "OrderPlaced"}},
        }

    def test_to_json_round_trips_through_json(self) -> None:
        envelope = _envelope()
        assert json.loads(envelope.to_json()) == envelope.to_wire()

    def test_stack_frame_size_not_on_wire(self) -> None:
        frame = StackFrame(level=0, method="run", assembly="at run (a.js:1:1)", file_name="a.js", line=1, size_in_bytes=99)
        assert "sizeInBytes" not in frame.to_wire()
        assert frame.to_wire()["fileName"] == "a.js"

    def test_exception_details_omit_missing_stack(self) -> None:
        wire = ExceptionDetails(type_name="ValueError", message="bad").to_wire()
        assert wire == {"typeName": "ValueError", "message": "bad", "hasFullStack": False}

    def test_empty_metric_data(self) -> None:
        assert MetricData().to_wire() == {"ver": 2, "metrics": []}


class TestDomainSupportsProperties:
    def test_bodies_with_properties(self) -> None:
        assert domain_supports_properties(MessageData()) is True
        assert domain_supports_properties(EventData()) is True

    def test_base_domain_and_none(self) -> None:
        assert domain_supports_properties(Domain()) is False
        assert domain_supports_properties(None) is False


class TestClientContext:
    def test_create_fills_host_and_sdk_defaults(self) -> None:
        context = ClientContext.create(cloud_role="checkout")
        keys = ContextTagKeys()
        assert context.tags[keys.cloud_role] == "checkout"
        assert context.tags[keys.cloud_role_instance] == socket.gethostname()
        assert context.tags[keys.internal_sdk_version].startswith("insightwire:")

    def test_create_without_role(self) -> None:
        context = ClientContext.create()
        assert context.keys.cloud_role not in context.tags

    def test_default_operation_keys(self) -> None:
        keys = ContextTagKeys()
        assert (keys.operation_id, keys.operation_name, keys.operation_parent_id) == (
            "ai.operation.id",
            "ai.operation.name",
            "ai.operation.parentId",
        )


class TestErrors:
    def test_unknown_type_default_message(self) -> None:
        error = UnknownTelemetryTypeError("PageViewData")
        assert error.telemetry_type == "PageViewData"
        assert "PageViewData" in str(error)
        assert isinstance(error, ValueError)
