# src/insightwire/envelope/sanitizer.py
"""Property sanitization for custom dimensions.

Custom properties arrive as arbitrary key/value bags. The ingestion service
only accepts string values, so every value is rendered to a string here:

- Strings pass through; bools and numbers render in JSON form
- ``None`` becomes an empty string
- Functions, methods and classes are dropped (logged)
- Everything else is serialized as compact JSON, after an extraction step
  that reduces exceptions to ``{message, code}`` and honours custom
  serialization hooks

Serialization never raises. A value that cannot be serialized is replaced
with ``"<TypeName> (Error: <reason>)"`` so the rest of the map survives.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

MAX_PROPERTY_LENGTH = 8192


def _is_primitive(value: Any) -> bool:
    return isinstance(value, str | int | float | bool)


def _primitive_to_string(value: str | int | float | bool) -> str:
    if isinstance(value, str):
        return value
    # JSON form gives "true"/"false" and "NaN"/"Infinity" like other SDKs emit
    return json.dumps(value)


def _is_function(value: Any) -> bool:
    return inspect.isroutine(value) or inspect.isclass(value)


def _extract_error(err: BaseException) -> dict[str, Any]:
    """Reduce an exception to a small JSON-friendly map.

    Library exceptions often expose a ``code`` or an ``id`` attribute.
    ``code`` falls back to ``id``, then to "".
    """
    code = getattr(err, "code", None) or getattr(err, "id", None) or ""
    return {"message": str(err), "code": code}


def _extract_object(value: Any) -> Any:
    """Pre-convert a value before JSON serialization.

    May return a primitive, in which case the caller uses it directly
    instead of serializing (avoids double quoting dates).
    """
    if isinstance(value, BaseException):
        return _extract_error(value)
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    return value


def _serialize(key: str, value: Any) -> str:
    try:
        target = value if isinstance(value, list | tuple) else _extract_object(value)
        if isinstance(target, str):
            return target
        return json.dumps(target, separators=(",", ":"))
    except Exception as e:
        # Serialization MUST NOT raise - one bad value cannot drop the map
        logger.info("Property could not be serialized", key=key, error=str(e))
        return f"{type(value).__name__} (Error: {e})"


def validate_string_map(obj: Any) -> dict[str, str] | None:
    """Render a property bag as a string-only map.

    Args:
        obj: Property bag. ``None`` means "no properties".

    Returns:
        New map of sanitized, truncated string values, or None when ``obj``
        is not a mapping. Callers treat None as "no properties".
    """
    if obj is None:
        return None
    if not isinstance(obj, Mapping):
        logger.info("Invalid properties dropped from payload", properties_type=type(obj).__name__)
        return None

    result: dict[str, str] = {}
    for key, value in obj.items():
        key = str(key)
        if value is None:
            rendered = ""
        elif _is_primitive(value):
            rendered = _primitive_to_string(value)
        elif _is_function(value):
            logger.info("Property was a function; will not serialize", key=key)
            continue
        else:
            rendered = _serialize(key, value)

        result[key] = rendered[:MAX_PROPERTY_LENGTH]
    return result
