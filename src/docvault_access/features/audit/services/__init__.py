"""Audit services."""

from .audit_emitter import AuditEmitter
from .sinks import InMemoryAuditSink, LoggingAuditSink

__all__ = ["AuditEmitter", "InMemoryAuditSink", "LoggingAuditSink"]
