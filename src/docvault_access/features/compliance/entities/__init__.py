"""Compliance entities."""

from .compliance_settings import (
    BOOLEAN_SETTINGS,
    INTEGER_SETTINGS,
    ComplianceAction,
    ComplianceDecision,
    ComplianceRestrictions,
    ComplianceSettings,
    EnforcedSetting,
    SettingChange,
)
from .protocols import ComplianceRepository

__all__ = [
    "BOOLEAN_SETTINGS",
    "INTEGER_SETTINGS",
    "ComplianceAction",
    "ComplianceDecision",
    "ComplianceRestrictions",
    "ComplianceSettings",
    "EnforcedSetting",
    "SettingChange",
    "ComplianceRepository",
]
