"""Audit entities."""

from .audit_event import AuditAction, AuditEvent, AuditOutcome, AuditSink

__all__ = ["AuditAction", "AuditEvent", "AuditOutcome", "AuditSink"]
