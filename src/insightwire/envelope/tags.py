# src/insightwire/envelope/tags.py
"""Envelope tag resolution.

Precedence, highest first:
1. Per-telemetry ``tag_overrides``
2. Client context default tags
3. The correlation context, for the operation id/name/parent id keys only,
   and only where the key is still unset or empty after 1 and 2
"""

from collections.abc import Mapping

from insightwire.contracts.context import ClientContext, ContextTagKeys, CorrelationContext

_DEFAULT_KEYS = ContextTagKeys()


def get_tags(
    context: ClientContext | None,
    tag_overrides: Mapping[str, str] | None = None,
    correlation_context: CorrelationContext | None = None,
) -> dict[str, str]:
    """Build the tag map for one envelope.

    Returns a fresh dict; neither the context nor the overrides are mutated.
    """
    tags: dict[str, str] = {}
    if context is not None:
        tags.update(context.tags)
    if tag_overrides:
        tags.update(tag_overrides)

    if correlation_context is not None:
        keys = context.keys if context is not None else _DEFAULT_KEYS
        operation = correlation_context.operation
        for key, value in (
            (keys.operation_id, operation.id),
            (keys.operation_name, operation.name),
            (keys.operation_parent_id, operation.parent_id),
        ):
            resolved = tags.get(key) or value
            if resolved is not None:
                tags[key] = resolved

    return tags
