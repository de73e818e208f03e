"""Audit event entity and sink protocol."""

from abc import abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ....core.value_objects import TenantId, UserId


class AuditOutcome(str, Enum):
    SUCCESS = "success"
    DENIED = "denied"
    FAILED = "failed"


class AuditAction:
    """Action names emitted by the engine."""

    FILE_LOCK = "file.lock"
    FILE_UNLOCK = "file.unlock"
    ACCESS_DENIED = "access.denied"
    COMPLIANCE_MODE_CHANGE = "compliance.mode_change"
    SETTING_UPDATE = "settings.update"
    ROLE_CREATE = "role.create"
    ROLE_UPDATE = "role.update"
    ROLE_DELETE = "role.delete"
    ROLE_PERMISSIONS_UPDATE = "role.permissions_update"


@dataclass(frozen=True)
class AuditEvent:
    """One structured audit record. The engine produces it; storage is external."""

    actor: UserId
    tenant_id: Optional[TenantId]
    action: str
    resource_type: str
    resource_id: Optional[str]
    outcome: AuditOutcome
    timestamp: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actor": str(self.actor),
            "tenant_id": str(self.tenant_id) if self.tenant_id else None,
            "action": self.action,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "outcome": self.outcome.value,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }


@runtime_checkable
class AuditSink(Protocol):
    """Write-only destination for audit events."""

    @abstractmethod
    async def emit(self, event: AuditEvent) -> None:
        """Deliver one event."""
        ...
