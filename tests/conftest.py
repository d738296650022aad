# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from insightwire.contracts import ClientContext, ContextTagKeys, CorrelationContext, Operation
from insightwire.core.config import TelemetryConfig

INSTRUMENTATION_KEY = "1aa11111-bbbb-1ccc-8ddd-eeeeffff3333"
CORRELATION_ID = "cid-v1:fe7a3c6e-7a4c-4bc4-9c83-a5a4e1b7c2d0"


@pytest.fixture
def telemetry_config() -> TelemetryConfig:
    """Config with an instrumentation key and correlation id, no proxies."""
    return TelemetryConfig(
        instrumentation_key=INSTRUMENTATION_KEY,
        sampling_percentage=50,
        correlation_id=CORRELATION_ID,
    )


@pytest.fixture
def client_context() -> ClientContext:
    """Client context with deterministic default tags."""
    keys = ContextTagKeys()
    return ClientContext(
        tags={
            keys.cloud_role_instance: "host-01",
            keys.internal_sdk_version: "insightwire:test",
        },
        keys=keys,
    )


@pytest.fixture
def correlation_context() -> CorrelationContext:
    return CorrelationContext(
        operation=Operation(id="op-123", name="GET /orders", parent_id="|op-123.1."),
    )


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
