# src/insightwire/correlation/__init__.py
"""Correlation propagation across outbound calls.

Components:
- domains: is_domain_excluded() host exclusion patterns
- request: build_outbound_request() proxy/TLS-aware request construction
- headers: attach_correlation_header() request-context merging
- ids: W3C trace id helpers
- propagator: CorrelationPropagator binding config and the shared TLS pool
"""

from insightwire.correlation.domains import (
    can_include_correlation_header,
    compile_domain_pattern,
    is_domain_excluded,
)
from insightwire.correlation.headers import (
    REQUEST_CONTEXT_HEADER,
    REQUEST_CONTEXT_SOURCE_KEY,
    attach_correlation_header,
    merge_correlation_header,
)
from insightwire.correlation.ids import is_valid_w3c_id, w3c_trace_id
from insightwire.correlation.propagator import CorrelationPropagator
from insightwire.correlation.request import (
    OutboundRequest,
    build_outbound_request,
    create_tls_context,
    create_tls_restricted_pool,
)

__all__ = [
    "REQUEST_CONTEXT_HEADER",
    "REQUEST_CONTEXT_SOURCE_KEY",
    "CorrelationPropagator",
    "OutboundRequest",
    "attach_correlation_header",
    "build_outbound_request",
    "can_include_correlation_header",
    "compile_domain_pattern",
    "create_tls_context",
    "create_tls_restricted_pool",
    "is_domain_excluded",
    "is_valid_w3c_id",
    "merge_correlation_header",
    "w3c_trace_id",
]
