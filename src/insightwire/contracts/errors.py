# src/insightwire/contracts/errors.py
"""Exceptions raised for caller errors.

Runtime failures inside envelope assembly and correlation propagation are
absorbed and logged. These exceptions only surface when the caller hands
us something that cannot be interpreted at all.
"""


class InsightwireError(Exception):
    """Base class for insightwire errors."""


class UnknownTelemetryTypeError(InsightwireError, ValueError):
    """Raised when a telemetry type has no converter.

    Attributes:
        telemetry_type: The type discriminator that was passed in
    """

    def __init__(self, telemetry_type: object, message: str | None = None) -> None:
        self.telemetry_type = telemetry_type
        super().__init__(message or f"Unknown telemetry type: {telemetry_type!r}")


class ConfigurationError(InsightwireError):
    """Raised when configuration values cannot be parsed."""


class InvalidRequestUrlError(InsightwireError, ValueError):
    """Raised when an outbound request target is not an http(s) URL with a host."""
