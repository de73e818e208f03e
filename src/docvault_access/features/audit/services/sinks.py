"""Audit sink implementations."""

import json
import logging
from typing import List, Optional

from ....config.logging_config import LoggingConfig
from ..entities import AuditEvent, AuditOutcome


class LoggingAuditSink:
    """Writes one structured log record per event on the audit logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LoggingConfig.AUDIT_LOGGER)

    async def emit(self, event: AuditEvent) -> None:
        payload = event.to_dict()
        level = logging.INFO if event.outcome == AuditOutcome.SUCCESS else logging.WARNING
        self.logger.log(level, json.dumps(payload, sort_keys=True), extra={"audit": payload})


class InMemoryAuditSink:
    """Collects events in a list; used by tests and local runs."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    async def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

    def find(self, action: Optional[str] = None, outcome: Optional[AuditOutcome] = None) -> List[AuditEvent]:
        return [
            e for e in self.events
            if (action is None or e.action == action) and (outcome is None or e.outcome == outcome)
        ]

    def clear(self) -> None:
        self.events.clear()
