"""Compliance settings entities and the per-mode restriction tables."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ....config.constants import DEFAULT_TENANT_SETTINGS, ComplianceMode, SettingName
from ....core.value_objects import TenantId


BOOLEAN_SETTINGS: FrozenSet[str] = frozenset({
    SettingName.MFA_REQUIRED,
    SettingName.PUBLIC_SHARING_ENABLED,
    SettingName.AUDIT_LOGGING_ENABLED,
    SettingName.EXPORT_LOGGING_ENABLED,
    SettingName.FILE_VERSIONING_ENABLED,
    SettingName.DELETION_REQUESTS_ALLOWED,
    SettingName.CONSENT_TRACKING_ENABLED,
})

INTEGER_SETTINGS: FrozenSet[str] = frozenset({
    SettingName.SESSION_TIMEOUT_MINUTES,
    SettingName.RETENTION_POLICY_DAYS,
})


@dataclass(frozen=True)
class ComplianceSettings:
    """A tenant's compliance mode, the settings it locks, and current values."""

    tenant_id: TenantId
    mode: ComplianceMode = ComplianceMode.STANDARD
    locked_fields: FrozenSet[str] = frozenset()
    values: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_TENANT_SETTINGS))

    def __post_init__(self):
        object.__setattr__(self, "locked_fields", frozenset(self.locked_fields))
        object.__setattr__(self, "values", {**DEFAULT_TENANT_SETTINGS, **dict(self.values)})

    def get(self, name: str) -> Any:
        return self.values.get(name)

    def is_locked(self, name: str) -> bool:
        return name in self.locked_fields

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": str(self.tenant_id),
            "mode": self.mode.value,
            "mode_label": self.mode.label,
            "locked_fields": sorted(self.locked_fields),
            "values": dict(self.values),
        }


@dataclass(frozen=True)
class SettingChange:
    """A requested change of one tenant setting."""

    name: str
    value: Any


@dataclass(frozen=True)
class ComplianceDecision:
    """Outcome of applying a change: ``allow`` or ``forced`` with the forced value."""

    setting: str
    requested: Any
    value: Any
    forced: bool = False

    @property
    def allowed(self) -> bool:
        return not self.forced

    @classmethod
    def allow(cls, change: SettingChange) -> "ComplianceDecision":
        return cls(change.name, change.value, change.value, False)

    @classmethod
    def force(cls, change: SettingChange, value: Any) -> "ComplianceDecision":
        return cls(change.name, change.value, value, True)


class ComplianceAction(str, Enum):
    """Actions the compliance mode may block."""

    PUBLIC_SHARE = "public_share"
    DISABLE_MFA = "disable_mfa"
    DISABLE_AUDIT_LOG = "disable_audit_log"
    OVERWRITE_FILE = "overwrite_file"
    SET_RETENTION_DAYS = "set_retention_days"
    BLOCK_DELETION = "block_deletion"


@dataclass(frozen=True)
class EnforcedSetting:
    name: str
    description: str
    forced_value: Any


@dataclass(frozen=True)
class ComplianceRestrictions:
    """What a compliance mode forces.

    ``forced`` settings are locked to an exact value. Retention is a floor:
    values at or above ``min_retention_days`` are accepted.
    """

    mode: ComplianceMode
    enforced: tuple = ()
    min_retention_days: Optional[int] = None

    @property
    def forced(self) -> Dict[str, Any]:
        return {s.name: s.forced_value for s in self.enforced}

    @property
    def locked_fields(self) -> FrozenSet[str]:
        return frozenset(self.forced)

    @property
    def is_active(self) -> bool:
        return self.mode != ComplianceMode.STANDARD

    @classmethod
    def for_mode(cls, mode: ComplianceMode) -> "ComplianceRestrictions":
        return _RESTRICTIONS[ComplianceMode(mode)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "mode_label": self.mode.label,
            "is_active": self.is_active,
            "min_retention_days": self.min_retention_days,
            "enforced_settings": [
                {"name": s.name, "description": s.description, "forced_value": s.forced_value}
                for s in self.enforced
            ],
        }


_RESTRICTIONS: Dict[ComplianceMode, ComplianceRestrictions] = {
    ComplianceMode.STANDARD: ComplianceRestrictions(ComplianceMode.STANDARD),
    ComplianceMode.HIPAA: ComplianceRestrictions(
        ComplianceMode.HIPAA,
        enforced=(
            EnforcedSetting(SettingName.MFA_REQUIRED, "MFA is required for all users to protect PHI", True),
            EnforcedSetting(SettingName.SESSION_TIMEOUT_MINUTES, "Sessions expire after 15 minutes of inactivity", 15),
            EnforcedSetting(SettingName.PUBLIC_SHARING_ENABLED, "Public sharing is disabled to protect PHI", False),
            EnforcedSetting(SettingName.AUDIT_LOGGING_ENABLED, "All access events are logged", True),
            EnforcedSetting(SettingName.EXPORT_LOGGING_ENABLED, "All exports are logged", True),
        ),
        min_retention_days=2190,
    ),
    ComplianceMode.SOX: ComplianceRestrictions(
        ComplianceMode.SOX,
        enforced=(
            EnforcedSetting(SettingName.MFA_REQUIRED, "MFA is required for financial data access", True),
            EnforcedSetting(SettingName.FILE_VERSIONING_ENABLED, "Files are versioned, never overwritten", True),
            EnforcedSetting(SettingName.PUBLIC_SHARING_ENABLED, "Public sharing is disabled for financial documents", False),
            EnforcedSetting(SettingName.AUDIT_LOGGING_ENABLED, "All document and permission changes are logged", True),
            EnforcedSetting(SettingName.EXPORT_LOGGING_ENABLED, "All exports are logged", True),
        ),
        min_retention_days=2555,
    ),
    ComplianceMode.GDPR: ComplianceRestrictions(
        ComplianceMode.GDPR,
        enforced=(
            EnforcedSetting(SettingName.DELETION_REQUESTS_ALLOWED, "Data deletion requests cannot be blocked", True),
            EnforcedSetting(SettingName.CONSENT_TRACKING_ENABLED, "Consent must be documented", True),
            EnforcedSetting(SettingName.EXPORT_LOGGING_ENABLED, "All data exports are logged", True),
            EnforcedSetting(SettingName.AUDIT_LOGGING_ENABLED, "Processing activity is logged", True),
        ),
        min_retention_days=30,
    ),
}
