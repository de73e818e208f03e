"""Tests for role hierarchy, permission keys and default tables."""

import pytest

from docvault_access.config.constants import (
    ALL_PERMISSIONS,
    BASE_ROLE_DEFAULTS,
    DEFAULT_TENANT_SETTINGS,
    LOCK_REQUIRABLE_ROLES,
    BaseRole,
    ComplianceMode,
    PermissionKey,
    SettingName,
    get_base_permissions,
)


class TestBaseRole:
    """Hierarchy ordering of the four base tiers."""

    def test_total_order(self):
        assert BaseRole.EMPLOYEE < BaseRole.MANAGER < BaseRole.ADMIN < BaseRole.SUPER_ADMIN
        assert [r.level for r in BaseRole] == [0, 1, 2, 3]

    def test_at_least_is_reflexive(self):
        for role in BaseRole:
            assert role.at_least(role)
        assert BaseRole.ADMIN.at_least(BaseRole.MANAGER)
        assert not BaseRole.MANAGER.at_least(BaseRole.ADMIN)

    def test_parse(self):
        assert BaseRole.parse("SuperAdmin") is BaseRole.SUPER_ADMIN
        with pytest.raises(ValueError):
            BaseRole.parse("Owner")

    def test_comparison_with_other_types_is_not_supported(self):
        with pytest.raises(TypeError):
            BaseRole.ADMIN > 3


class TestPermissionDefaults:

    def test_permission_key_parts(self):
        assert PermissionKey.FILES_LOCK.resource == "files"
        assert PermissionKey.FILES_LOCK.action == "lock"
        assert len(ALL_PERMISSIONS) == 21

    def test_unknown_permission(self):
        with pytest.raises(ValueError):
            PermissionKey.parse("files.burn")

    def test_super_admin_holds_everything(self):
        assert get_base_permissions(BaseRole.SUPER_ADMIN) == ALL_PERMISSIONS

    def test_admin_lacks_only_tenant_management(self):
        assert ALL_PERMISSIONS - BASE_ROLE_DEFAULTS[BaseRole.ADMIN] == {PermissionKey.TENANTS_MANAGE}

    def test_manager_defaults(self):
        manager = get_base_permissions(BaseRole.MANAGER)
        assert PermissionKey.FILES_LOCK in manager
        assert PermissionKey.ROLES_VIEW in manager
        assert PermissionKey.ROLES_MANAGE not in manager
        assert PermissionKey.SETTINGS_VIEW not in manager

    def test_employee_defaults(self):
        assert get_base_permissions(BaseRole.EMPLOYEE) == {
            PermissionKey.FILES_VIEW,
            PermissionKey.FILES_UPLOAD,
            PermissionKey.FILES_DOWNLOAD,
            PermissionKey.REQUESTS_CREATE,
            PermissionKey.REQUESTS_VIEW,
        }

    def test_defaults_are_monotonic_in_the_hierarchy(self):
        roles = list(BaseRole)
        for lower, higher in zip(roles, roles[1:]):
            assert get_base_permissions(lower) <= get_base_permissions(higher)

    def test_super_admin_cannot_be_a_lock_requirement(self):
        assert BaseRole.SUPER_ADMIN not in LOCK_REQUIRABLE_ROLES


class TestComplianceMode:

    @pytest.mark.parametrize("raw, expected", [
        ("hipaa", ComplianceMode.HIPAA),
        ("SOC2", ComplianceMode.SOX),
        ("none", ComplianceMode.STANDARD),
        (" gdpr ", ComplianceMode.GDPR),
    ])
    def test_parse_aliases(self, raw, expected):
        assert ComplianceMode.parse(raw) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            ComplianceMode.parse("PCI")

    def test_labels(self):
        assert ComplianceMode.HIPAA.label == "HIPAA Secure"

    def test_default_settings_cover_every_setting(self):
        assert set(DEFAULT_TENANT_SETTINGS) == SettingName.ALL
