"""Compliance feature for docvault-access.

- entities/: ComplianceSettings, restriction tables, decisions
- services/: CompliancePolicyOverlay, TenantSettingsService
- repositories/: asyncpg and in-memory persistence
- routers/: FastAPI endpoints
"""

from .entities import (
    ComplianceAction,
    ComplianceDecision,
    ComplianceRepository,
    ComplianceRestrictions,
    ComplianceSettings,
    SettingChange,
)
from .services import CompliancePolicyOverlay, TenantSettingsService
from .repositories import AsyncPGComplianceRepository, InMemoryComplianceRepository

__all__ = [
    "ComplianceAction",
    "ComplianceDecision",
    "ComplianceRepository",
    "ComplianceRestrictions",
    "ComplianceSettings",
    "SettingChange",
    "CompliancePolicyOverlay",
    "TenantSettingsService",
    "AsyncPGComplianceRepository",
    "InMemoryComplianceRepository",
]
