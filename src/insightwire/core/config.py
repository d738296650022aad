# src/insightwire/core/config.py
"""
Client configuration consumed by envelope assembly and correlation.

Uses Pydantic for validation. Settings are frozen (immutable) after
construction, so a single instance can be shared by concurrent request
handlers without locking.
"""

import os
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel, Field, field_validator

from insightwire.contracts.errors import ConfigurationError

CONNECTION_STRING_ENV = "APPLICATIONINSIGHTS_CONNECTION_STRING"
INSTRUMENTATION_KEY_ENV = "APPINSIGHTS_INSTRUMENTATIONKEY"


def parse_connection_string(connection_string: str) -> dict[str, str]:
    """Split a ``Key=Value;Key=Value`` connection string.

    Keys are lower-cased. Empty segments are ignored.

    Raises:
        ConfigurationError: If a segment has no ``=`` separator
    """
    result: dict[str, str] = {}
    for segment in connection_string.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Malformed connection string segment: {segment!r}")
        result[key.strip().lower()] = value.strip()
    return result


class TelemetryConfig(BaseModel):
    """Configuration for one telemetry client.

    Example:
        config = TelemetryConfig(
            instrumentation_key="1aa11111-bbbb-1ccc-8ddd-eeeeffff3333",
            correlation_id="cid-v1:fe7a3c6e-7a4c-4bc4-9c83-a5a4e1b7c2d0",
            correlation_header_excluded_domains=("*.core.windows.net",),
        )

    Pools:
        ``http_pool`` and ``https_pool`` are pre-built httpx transports. When
        set they override the default connection pool for that scheme.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    instrumentation_key: str = Field(default="", description="Destination resource key")
    sampling_percentage: float = Field(
        default=100,
        description="Percentage of telemetry retained (0-100)",
    )
    correlation_id: str = Field(
        default="",
        description="Identity of this service in the request-context header",
    )
    correlation_header_excluded_domains: tuple[str, ...] = Field(
        default=(),
        description="Host patterns that never receive correlation headers ('*' is a wildcard)",
    )
    excluded_domain_literal_dots: bool = Field(
        default=False,
        description="Match '.' in excluded-domain patterns literally instead of as any character",
    )
    proxy_http_url: str | None = Field(default=None, description="Proxy for http:// targets")
    proxy_https_url: str | None = Field(default=None, description="Proxy for https:// targets")
    http_pool: httpx.BaseTransport | None = Field(default=None, description="Pool for plain HTTP calls")
    https_pool: httpx.BaseTransport | None = Field(default=None, description="Pool for HTTPS calls")

    @field_validator("sampling_percentage")
    @classmethod
    def validate_sampling_percentage(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError(f"sampling_percentage must be between 0 and 100, got {v}")
        return v

    @field_validator("correlation_header_excluded_domains")
    @classmethod
    def validate_excluded_domains(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            if not pattern.strip():
                raise ValueError("correlation_header_excluded_domains entries cannot be empty")
        return v

    @field_validator("proxy_http_url", "proxy_https_url")
    @classmethod
    def blank_proxy_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "TelemetryConfig":
        """Build configuration from environment variables.

        The instrumentation key is taken from the connection string's
        ``InstrumentationKey`` segment when present, otherwise from the
        legacy key variable. Proxies come from ``http_proxy``/``https_proxy``
        (either case). Explicit keyword overrides win over the environment.

        Raises:
            ConfigurationError: If the connection string is malformed
        """
        env = os.environ if environ is None else environ

        values: dict[str, Any] = {}
        connection_string = env.get(CONNECTION_STRING_ENV)
        if connection_string:
            parsed = parse_connection_string(connection_string)
            if "instrumentationkey" in parsed:
                values["instrumentation_key"] = parsed["instrumentationkey"]
        if "instrumentation_key" not in values and env.get(INSTRUMENTATION_KEY_ENV):
            values["instrumentation_key"] = env[INSTRUMENTATION_KEY_ENV]

        http_proxy = env.get("http_proxy") or env.get("HTTP_PROXY")
        https_proxy = env.get("https_proxy") or env.get("HTTPS_PROXY")
        if http_proxy:
            values["proxy_http_url"] = http_proxy
        if https_proxy:
            values["proxy_https_url"] = https_proxy

        values.update(overrides)
        return cls(**values)
