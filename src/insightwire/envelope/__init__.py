# src/insightwire/envelope/__init__.py
"""Envelope assembly: telemetry records to wire envelopes.

Components:
- sanitizer: validate_string_map() for custom property bags
- stack: parse_stack() with the 32 KiB parsed-stack bound
- tags: get_tags() tag precedence resolution
- timespan: ms_to_timespan() duration rendering
- factory: create_envelope(), the public entry point
"""

from insightwire.envelope.factory import create_envelope, envelope_name, merge_common_properties
from insightwire.envelope.sanitizer import MAX_PROPERTY_LENGTH, validate_string_map
from insightwire.envelope.stack import EXCEPTION_PARSED_STACK_THRESHOLD, parse_stack
from insightwire.envelope.tags import get_tags
from insightwire.envelope.timespan import ms_to_timespan

__all__ = [
    "EXCEPTION_PARSED_STACK_THRESHOLD",
    "MAX_PROPERTY_LENGTH",
    "create_envelope",
    "envelope_name",
    "get_tags",
    "merge_common_properties",
    "ms_to_timespan",
    "parse_stack",
    "validate_string_map",
]
