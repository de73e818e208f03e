"""Compliance repository implementations."""

from .compliance_repository import AsyncPGComplianceRepository
from .memory_repository import InMemoryComplianceRepository

__all__ = ["AsyncPGComplianceRepository", "InMemoryComplianceRepository"]
