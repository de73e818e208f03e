"""Audit feature: structured events for lock, denial and compliance actions."""

from .entities import AuditAction, AuditEvent, AuditOutcome, AuditSink
from .services import AuditEmitter, InMemoryAuditSink, LoggingAuditSink

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditOutcome",
    "AuditSink",
    "AuditEmitter",
    "InMemoryAuditSink",
    "LoggingAuditSink",
]
