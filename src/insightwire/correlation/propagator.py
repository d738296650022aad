# src/insightwire/correlation/propagator.py
"""Correlation propagation bound to one client's configuration.

Outbound-call interception code holds a single ``CorrelationPropagator``
for the lifetime of the process. It owns the shared TLS-restricted pool so
the pool is built once and passed explicitly into every request build.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from insightwire.core.config import TelemetryConfig
from insightwire.correlation.domains import is_domain_excluded
from insightwire.correlation.headers import SupportsHeaders, attach_correlation_header
from insightwire.correlation.request import (
    OutboundRequest,
    build_outbound_request,
    create_tls_restricted_pool,
)


class CorrelationPropagator:
    """Decides, builds and labels outbound requests for one client.

    Example:
        propagator = CorrelationPropagator(config)
        request = propagator.build_request("https://api.example.com/orders", method="POST")
        if not propagator.is_domain_excluded(request.url):
            propagator.attach_header(request, request.headers.get("request-context"))
        response = request.dispatch()
    """

    def __init__(self, config: TelemetryConfig, tls_pool: httpx.BaseTransport | None = None) -> None:
        self._config = config
        self._tls_pool = tls_pool if tls_pool is not None else create_tls_restricted_pool()

    @property
    def config(self) -> TelemetryConfig:
        return self._config

    @property
    def tls_pool(self) -> httpx.BaseTransport:
        return self._tls_pool

    def is_domain_excluded(self, target_url: str | None) -> bool:
        return is_domain_excluded(self._config, target_url)

    def build_request(
        self,
        target_url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
    ) -> OutboundRequest:
        return build_outbound_request(
            self._config,
            target_url,
            method=method,
            headers=headers,
            content=content,
            tls_pool=self._tls_pool,
        )

    def attach_header(self, request: SupportsHeaders, raw_header_value: Any = None) -> None:
        attach_correlation_header(self._config, request, raw_header_value)

    def prepare(
        self,
        target_url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
    ) -> OutboundRequest:
        """Build a request and add the correlation header unless the host is excluded."""
        request = self.build_request(target_url, method=method, headers=headers, content=content)
        if not self.is_domain_excluded(request.url):
            self.attach_header(request, request.headers.get_list("request-context") or None)
        return request

    def close(self) -> None:
        """Close the shared TLS pool. Idempotent."""
        self._tls_pool.close()
