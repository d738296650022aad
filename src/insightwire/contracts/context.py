# src/insightwire/contracts/context.py
"""Client and correlation context consumed by envelope assembly.

``ClientContext`` holds the default tags stamped on every envelope a client
sends, plus the well-known tag key names. ``CorrelationContext`` describes
the logical operation currently executing. It is supplied by the tracing
provider and passed explicitly; ``None`` means no operation is active.
"""

import platform
import socket
from dataclasses import dataclass, field
from importlib import metadata


@dataclass(frozen=True, slots=True)
class ContextTagKeys:
    """Well-known envelope tag names."""

    application_version: str = "ai.application.ver"
    device_id: str = "ai.device.id"
    device_os_version: str = "ai.device.osVersion"
    device_type: str = "ai.device.type"
    location_ip: str = "ai.location.ip"
    operation_id: str = "ai.operation.id"
    operation_name: str = "ai.operation.name"
    operation_parent_id: str = "ai.operation.parentId"
    operation_synthetic_source: str = "ai.operation.syntheticSource"
    session_id: str = "ai.session.id"
    user_id: str = "ai.user.id"
    user_auth_user_id: str = "ai.user.authUserId"
    cloud_role: str = "ai.cloud.role"
    cloud_role_instance: str = "ai.cloud.roleInstance"
    internal_sdk_version: str = "ai.internal.sdkVersion"


@dataclass(frozen=True, slots=True)
class Operation:
    """Identifiers of one logical operation."""

    id: str
    name: str | None = None
    parent_id: str | None = None


@dataclass(frozen=True, slots=True)
class CorrelationContext:
    """Read-only view of the currently executing operation."""

    operation: Operation


def _sdk_version() -> str:
    try:
        version = metadata.version("insightwire")
    except metadata.PackageNotFoundError:
        version = "0.0.0"
    return f"insightwire:{version}"


@dataclass(slots=True)
class ClientContext:
    """Default tags applied to every envelope sent by one client.

    Attributes:
        tags: Tag defaults. Copied into each envelope, never mutated by
            assembly.
        keys: Tag key names used to locate the operation tags.
    """

    tags: dict[str, str] = field(default_factory=dict)
    keys: ContextTagKeys = field(default_factory=ContextTagKeys)

    @classmethod
    def create(cls, *, cloud_role: str | None = None) -> "ClientContext":
        """Build a context populated with host and SDK defaults."""
        keys = ContextTagKeys()
        tags = {
            keys.cloud_role_instance: socket.gethostname(),
            keys.device_os_version: f"{platform.system()} {platform.release()}".strip(),
            keys.internal_sdk_version: _sdk_version(),
        }
        if cloud_role:
            tags[keys.cloud_role] = cloud_role
        return cls(tags=tags, keys=keys)
