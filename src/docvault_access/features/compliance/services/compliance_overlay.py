"""Compliance policy overlay.

Forces settings dictated by a tenant's compliance mode irrespective of role
or permission configuration. Locked settings cannot be changed through the
general settings path by anyone, SuperAdmin included.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from ....config.constants import ComplianceMode, SettingName
from ....core.exceptions import ComplianceLockedError, ForbiddenError, ValidationError
from ....core.value_objects import TenantId
from ..entities import (
    BOOLEAN_SETTINGS,
    INTEGER_SETTINGS,
    ComplianceAction,
    ComplianceDecision,
    ComplianceRestrictions,
    ComplianceSettings,
    SettingChange,
)

logger = logging.getLogger(__name__)


_FORCED_AUDIT_ACTIONS: Dict[ComplianceMode, frozenset] = {
    ComplianceMode.HIPAA: frozenset({
        "file_view", "file_download", "file_preview", "file_access", "login", "login_failed",
    }),
    ComplianceMode.SOX: frozenset({
        "file_upload", "file_rename", "file_delete", "permission_change", "role_change", "settings_change",
    }),
    ComplianceMode.GDPR: frozenset({"file_export", "data_export", "deletion_request"}),
}


def validate_setting(change: SettingChange) -> SettingChange:
    """Reject unknown setting names and values of the wrong type."""
    if change.name not in SettingName.ALL:
        raise ValidationError(f"Unknown setting: {change.name}", field="name")
    if change.name in BOOLEAN_SETTINGS and not isinstance(change.value, bool):
        raise ValidationError(f"Setting '{change.name}' must be a boolean", field="value")
    if change.name in INTEGER_SETTINGS:
        if isinstance(change.value, bool) or not isinstance(change.value, int) or change.value <= 0:
            raise ValidationError(f"Setting '{change.name}' must be a positive integer", field="value")
    return change


class CompliancePolicyOverlay:
    """Applies per-mode restriction tables to setting changes and actions."""

    @staticmethod
    def restrictions(mode: ComplianceMode) -> ComplianceRestrictions:
        return ComplianceRestrictions.for_mode(mode)

    def apply(self, settings: ComplianceSettings, change: SettingChange) -> ComplianceDecision:
        """``allow``, or ``forced`` carrying the value the mode dictates."""
        validate_setting(change)
        restrictions = self.restrictions(settings.mode)

        forced = restrictions.forced
        if change.name in forced and change.value != forced[change.name]:
            return ComplianceDecision.force(change, forced[change.name])

        floor = restrictions.min_retention_days
        if change.name == SettingName.RETENTION_POLICY_DAYS and floor is not None and change.value < floor:
            return ComplianceDecision.force(change, floor)

        return ComplianceDecision.allow(change)

    def enforce(self, settings: ComplianceSettings, change: SettingChange) -> Any:
        """Return the value to store.

        Raises ComplianceLockedError for a locked field, and ValidationError
        for a retention period below the mode's minimum. Retention is never
        clamped on write; only a mode change raises it to the floor.
        """
        decision = self.apply(settings, change)
        if decision.forced and change.name == SettingName.RETENTION_POLICY_DAYS:
            raise ValidationError(
                f"{settings.mode.label} compliance mode requires minimum {decision.value} day retention",
                field="value",
                details={"setting": change.name, "mode": settings.mode.value, "minimum": decision.value},
            )
        if decision.forced:
            logger.info(
                f"Rejected change of {change.name} for tenant {settings.tenant_id}: "
                f"locked by {settings.mode.value}"
            )
            raise ComplianceLockedError(change.name, settings.mode.value, decision.value)
        return decision.value

    def check_action(
        self,
        mode: ComplianceMode,
        action: ComplianceAction,
        retention_days: Optional[int] = None,
    ) -> Optional[str]:
        """Reason the action is blocked under ``mode``, or None when allowed."""
        restrictions = self.restrictions(mode)
        forced = restrictions.forced
        label = mode.value

        if action == ComplianceAction.PUBLIC_SHARE:
            if forced.get(SettingName.PUBLIC_SHARING_ENABLED) is False:
                return f"{label} compliance mode prohibits public sharing"
        elif action == ComplianceAction.DISABLE_MFA:
            if forced.get(SettingName.MFA_REQUIRED) is True:
                return f"{label} compliance mode requires MFA to be enabled"
        elif action == ComplianceAction.DISABLE_AUDIT_LOG:
            if forced.get(SettingName.AUDIT_LOGGING_ENABLED) is True:
                return f"{label} compliance mode requires audit logging to be enabled"
        elif action == ComplianceAction.OVERWRITE_FILE:
            if forced.get(SettingName.FILE_VERSIONING_ENABLED) is True:
                return f"{label} compliance mode requires file versioning; files cannot be overwritten"
        elif action == ComplianceAction.SET_RETENTION_DAYS:
            if retention_days is None:
                raise ValidationError("retention_days is required", field="retention_days")
            floor = restrictions.min_retention_days
            if floor is not None and retention_days < floor:
                return f"{label} compliance mode requires minimum {floor} day retention"
        elif action == ComplianceAction.BLOCK_DELETION:
            if forced.get(SettingName.DELETION_REQUESTS_ALLOWED) is True:
                return f"{label} compliance requires that deletion requests cannot be blocked"
        return None

    def require_action(self, mode: ComplianceMode, action: ComplianceAction, retention_days: Optional[int] = None) -> None:
        reason = self.check_action(mode, action, retention_days)
        if reason:
            raise ForbiddenError(reason, reason="compliance_restricted", details={"action": action.value})

    @staticmethod
    def should_force_audit_log(mode: ComplianceMode, action_type: str) -> bool:
        return action_type in _FORCED_AUDIT_ACTIONS.get(mode, frozenset())

    def derive_settings(
        self,
        tenant_id: TenantId,
        mode: ComplianceMode,
        current_values: Mapping[str, Any],
    ) -> ComplianceSettings:
        """Settings for ``mode``: forced values and locked fields derived together."""
        restrictions = self.restrictions(mode)
        values = dict(current_values)
        values.update(restrictions.forced)

        floor = restrictions.min_retention_days
        if floor is not None:
            current = values.get(SettingName.RETENTION_POLICY_DAYS) or 0
            values[SettingName.RETENTION_POLICY_DAYS] = max(current, floor)

        return ComplianceSettings(
            tenant_id=tenant_id,
            mode=mode,
            locked_fields=restrictions.locked_fields,
            values=values,
        )
