"""Tests for CompliancePolicyOverlay restriction tables."""

import pytest

from docvault_access.config.constants import ComplianceMode, SettingName
from docvault_access.core.exceptions import ComplianceLockedError, ForbiddenError, ValidationError
from docvault_access.core.value_objects import TenantId
from docvault_access.features.compliance.entities import (
    ComplianceAction,
    ComplianceRestrictions,
    ComplianceSettings,
    SettingChange,
)


def _settings(overlay, mode, **values):
    return overlay.derive_settings(TenantId.generate(), mode, values)


class TestRestrictions:

    def test_standard_forces_nothing(self):
        restrictions = ComplianceRestrictions.for_mode(ComplianceMode.STANDARD)
        assert restrictions.forced == {}
        assert restrictions.min_retention_days is None
        assert not restrictions.is_active

    def test_hipaa(self):
        restrictions = ComplianceRestrictions.for_mode(ComplianceMode.HIPAA)
        assert restrictions.forced == {
            SettingName.MFA_REQUIRED: True,
            SettingName.SESSION_TIMEOUT_MINUTES: 15,
            SettingName.PUBLIC_SHARING_ENABLED: False,
            SettingName.AUDIT_LOGGING_ENABLED: True,
            SettingName.EXPORT_LOGGING_ENABLED: True,
        }
        assert restrictions.min_retention_days == 2190

    def test_sox(self):
        restrictions = ComplianceRestrictions.for_mode(ComplianceMode.SOX)
        assert restrictions.forced[SettingName.FILE_VERSIONING_ENABLED] is True
        assert restrictions.min_retention_days == 2555

    def test_gdpr(self):
        restrictions = ComplianceRestrictions.for_mode(ComplianceMode.GDPR)
        assert restrictions.forced[SettingName.DELETION_REQUESTS_ALLOWED] is True
        assert restrictions.forced[SettingName.CONSENT_TRACKING_ENABLED] is True
        assert SettingName.PUBLIC_SHARING_ENABLED not in restrictions.locked_fields

    def test_to_dict(self):
        data = ComplianceRestrictions.for_mode(ComplianceMode.HIPAA).to_dict()
        assert data["mode_label"] == "HIPAA Secure"
        assert len(data["enforced_settings"]) == 5


class TestDeriveSettings:

    def test_locked_fields_match_forced_values(self, overlay):
        for mode in ComplianceMode:
            settings = _settings(overlay, mode)
            forced = ComplianceRestrictions.for_mode(mode).forced
            assert settings.locked_fields == frozenset(forced)
            for name, value in forced.items():
                assert settings.get(name) == value

    def test_retention_is_raised_to_the_floor(self, overlay):
        settings = _settings(overlay, ComplianceMode.SOX, retention_policy_days=90)
        assert settings.get(SettingName.RETENTION_POLICY_DAYS) == 2555
        assert SettingName.RETENTION_POLICY_DAYS not in settings.locked_fields

    def test_longer_retention_is_kept(self, overlay):
        settings = _settings(overlay, ComplianceMode.HIPAA, retention_policy_days=3650)
        assert settings.get(SettingName.RETENTION_POLICY_DAYS) == 3650

    def test_standard_releases_locks_but_keeps_values(self, overlay):
        hipaa = _settings(overlay, ComplianceMode.HIPAA)
        standard = overlay.derive_settings(hipaa.tenant_id, ComplianceMode.STANDARD, hipaa.values)
        assert standard.locked_fields == frozenset()
        assert standard.get(SettingName.MFA_REQUIRED) is True


class TestApplyAndEnforce:

    def test_forced_value_is_reported(self, overlay):
        settings = _settings(overlay, ComplianceMode.HIPAA)
        decision = overlay.apply(settings, SettingChange(SettingName.MFA_REQUIRED, False))
        assert decision.forced
        assert decision.value is True
        assert decision.requested is False

    def test_setting_the_forced_value_is_allowed(self, overlay):
        settings = _settings(overlay, ComplianceMode.HIPAA)
        assert overlay.enforce(settings, SettingChange(SettingName.MFA_REQUIRED, True)) is True

    def test_locked_setting_raises(self, overlay):
        settings = _settings(overlay, ComplianceMode.HIPAA)
        with pytest.raises(ComplianceLockedError) as exc_info:
            overlay.enforce(settings, SettingChange(SettingName.PUBLIC_SHARING_ENABLED, True))
        assert exc_info.value.details["forced_value"] is False
        assert exc_info.value.mode == "HIPAA"

    def test_retention_below_floor_is_rejected_not_clamped(self, overlay):
        settings = _settings(overlay, ComplianceMode.HIPAA)
        assert SettingName.RETENTION_POLICY_DAYS not in settings.locked_fields
        with pytest.raises(ValidationError) as exc_info:
            overlay.enforce(settings, SettingChange(SettingName.RETENTION_POLICY_DAYS, 365))
        assert exc_info.value.details["minimum"] == 2190
        assert exc_info.value.details["mode"] == "HIPAA"
        assert overlay.enforce(settings, SettingChange(SettingName.RETENTION_POLICY_DAYS, 2190)) == 2190
        assert overlay.enforce(settings, SettingChange(SettingName.RETENTION_POLICY_DAYS, 4000)) == 4000

    def test_unlocked_settings_pass_through(self, overlay):
        settings = _settings(overlay, ComplianceMode.GDPR)
        assert overlay.enforce(settings, SettingChange(SettingName.PUBLIC_SHARING_ENABLED, False)) is False

    def test_standard_allows_everything(self, overlay):
        settings = ComplianceSettings(tenant_id=TenantId.generate())
        assert overlay.apply(settings, SettingChange(SettingName.MFA_REQUIRED, False)).allowed

    @pytest.mark.parametrize("name, value", [
        ("unknown_setting", True),
        (SettingName.MFA_REQUIRED, "yes"),
        (SettingName.SESSION_TIMEOUT_MINUTES, 0),
        (SettingName.SESSION_TIMEOUT_MINUTES, True),
    ])
    def test_invalid_changes(self, overlay, name, value):
        settings = ComplianceSettings(tenant_id=TenantId.generate())
        with pytest.raises(ValidationError):
            overlay.apply(settings, SettingChange(name, value))


class TestActions:

    @pytest.mark.parametrize("mode, action, blocked", [
        (ComplianceMode.HIPAA, ComplianceAction.PUBLIC_SHARE, True),
        (ComplianceMode.SOX, ComplianceAction.PUBLIC_SHARE, True),
        (ComplianceMode.GDPR, ComplianceAction.PUBLIC_SHARE, False),
        (ComplianceMode.STANDARD, ComplianceAction.PUBLIC_SHARE, False),
        (ComplianceMode.HIPAA, ComplianceAction.DISABLE_MFA, True),
        (ComplianceMode.GDPR, ComplianceAction.DISABLE_MFA, False),
        (ComplianceMode.GDPR, ComplianceAction.DISABLE_AUDIT_LOG, True),
        (ComplianceMode.SOX, ComplianceAction.OVERWRITE_FILE, True),
        (ComplianceMode.HIPAA, ComplianceAction.OVERWRITE_FILE, False),
        (ComplianceMode.GDPR, ComplianceAction.BLOCK_DELETION, True),
        (ComplianceMode.SOX, ComplianceAction.BLOCK_DELETION, False),
    ])
    def test_check_action(self, overlay, mode, action, blocked):
        assert (overlay.check_action(mode, action) is not None) is blocked

    def test_retention_action(self, overlay):
        assert overlay.check_action(ComplianceMode.SOX, ComplianceAction.SET_RETENTION_DAYS, 30) is not None
        assert overlay.check_action(ComplianceMode.SOX, ComplianceAction.SET_RETENTION_DAYS, 2555) is None
        with pytest.raises(ValidationError):
            overlay.check_action(ComplianceMode.SOX, ComplianceAction.SET_RETENTION_DAYS)

    def test_require_action(self, overlay):
        with pytest.raises(ForbiddenError) as exc_info:
            overlay.require_action(ComplianceMode.HIPAA, ComplianceAction.PUBLIC_SHARE)
        assert exc_info.value.reason == "compliance_restricted"

    def test_forced_audit_actions(self, overlay):
        assert overlay.should_force_audit_log(ComplianceMode.HIPAA, "file_view")
        assert not overlay.should_force_audit_log(ComplianceMode.HIPAA, "file_upload")
        assert overlay.should_force_audit_log(ComplianceMode.SOX, "role_change")
        assert not overlay.should_force_audit_log(ComplianceMode.STANDARD, "file_view")
