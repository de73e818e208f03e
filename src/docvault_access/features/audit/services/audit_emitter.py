"""Builds audit events for a principal and hands them to the sink."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ....core.value_objects import TenantId
from ...tenants.entities import PrincipalContext
from ..entities import AuditEvent, AuditOutcome, AuditSink

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEmitter:
    """Stamps events with the actor and a timestamp from an injectable clock."""

    def __init__(self, sink: AuditSink, clock: Callable[[], datetime] = _utcnow):
        self.sink = sink
        self.clock = clock

    async def record(
        self,
        principal: PrincipalContext,
        action: str,
        resource_type: str,
        resource_id: Any,
        outcome: AuditOutcome,
        tenant_id: Optional[TenantId] = None,
        **metadata: Any,
    ) -> AuditEvent:
        event = AuditEvent(
            actor=principal.user_id,
            tenant_id=tenant_id or principal.tenant_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            outcome=outcome,
            timestamp=self.clock(),
            metadata={"role": principal.role_name, **metadata},
        )
        await self.sink.emit(event)
        logger.debug(f"Audit {action} {resource_type}:{resource_id} -> {outcome.value}")
        return event
