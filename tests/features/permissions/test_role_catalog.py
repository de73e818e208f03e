"""Tests for RoleCatalog resolution and administration."""

import pytest

from docvault_access.config.constants import ALL_PERMISSIONS, BaseRole, PermissionKey, UserStatus
from docvault_access.core.exceptions import (
    ConflictError,
    ForbiddenError,
    RoleInUseError,
    RoleNotFoundError,
    ScopeViolationError,
    ValidationError,
)
from docvault_access.core.value_objects import RoleId
from docvault_access.features.audit.entities import AuditAction
from docvault_access.features.permissions.entities import ResolvedPermission, granted_keys
from docvault_access.features.permissions.repositories import InMemoryRoleRepository
from docvault_access.features.permissions.services import RoleCatalog


async def _system_role(role_repository, base_role):
    return await role_repository.find_by_name(base_role.value, None)


class InterleavingRoleRepository(InMemoryRoleRepository):
    """Runs a one-shot callback after grant rows are read, before returning them."""

    def __init__(self):
        super().__init__()
        self.after_read = None

    async def get_grants(self, role_id):
        grants = await super().get_grants(role_id)
        callback, self.after_read = self.after_read, None
        if callback is not None:
            await callback()
        return grants


class TestPermissionResolution:
    """Effective permissions: base defaults overlaid with explicit grants."""

    @pytest.mark.asyncio
    async def test_system_roles_resolve_to_base_defaults(self, role_catalog, tenant_id):
        resolved = await role_catalog.resolve_permissions("Manager", tenant_id)
        assert set(resolved) == ALL_PERMISSIONS
        assert resolved[PermissionKey.FILES_LOCK].granted
        assert not resolved[PermissionKey.ROLES_MANAGE].granted
        assert all(r.inherited for r in resolved.values())

    @pytest.mark.asyncio
    async def test_custom_role_overrides(self, role_catalog, admin, tenant_id):
        await role_catalog.create_role(
            admin, "Auditor", BaseRole.EMPLOYEE,
            permissions={"audit.view": True, "files.upload": False},
        )
        resolved = await role_catalog.resolve_permissions("Auditor", tenant_id)
        assert resolved[PermissionKey.AUDIT_VIEW] == ResolvedPermission(PermissionKey.AUDIT_VIEW, True, False)
        assert resolved[PermissionKey.FILES_UPLOAD] == ResolvedPermission(PermissionKey.FILES_UPLOAD, False, False)
        assert resolved[PermissionKey.FILES_VIEW] == ResolvedPermission(PermissionKey.FILES_VIEW, True, True)

    @pytest.mark.asyncio
    async def test_super_admin_based_role_holds_everything(self, role_catalog, tenant_id):
        resolved = await role_catalog.resolve_permissions("SuperAdmin", tenant_id)
        assert all(r.granted for r in resolved.values())

    @pytest.mark.asyncio
    async def test_unknown_role(self, role_catalog, tenant_id):
        with pytest.raises(RoleNotFoundError):
            await role_catalog.resolve_permissions("Ghost", tenant_id)

    @pytest.mark.asyncio
    async def test_has_permission(self, role_catalog, employee, manager):
        assert await role_catalog.has_permission(employee, "files.view")
        assert not await role_catalog.has_permission(employee, PermissionKey.FILES_LOCK)
        assert await role_catalog.has_permission(manager, PermissionKey.FILES_LOCK)

    @pytest.mark.asyncio
    async def test_unknown_permission_key_is_rejected(self, role_catalog, employee):
        with pytest.raises(ValidationError):
            await role_catalog.has_permission(employee, "files.burn")

    @pytest.mark.asyncio
    async def test_suspended_principal_holds_nothing(self, role_catalog, make_principal):
        suspended = make_principal(BaseRole.SUPER_ADMIN, status=UserStatus.SUSPENDED)
        assert not await role_catalog.has_permission(suspended, PermissionKey.FILES_VIEW)

    @pytest.mark.asyncio
    async def test_require_permission(self, role_catalog, employee):
        with pytest.raises(ForbiddenError) as exc_info:
            await role_catalog.require_permission(employee, PermissionKey.ROLES_MANAGE)
        assert exc_info.value.reason == "missing_permission"

    @pytest.mark.asyncio
    async def test_tenant_role_shadows_global_role(self, role_catalog, super_admin, admin, tenant_id, other_tenant_id):
        await role_catalog.create_role(super_admin, "Reviewer", BaseRole.MANAGER, is_global=True)
        shadow = await role_catalog.create_role(admin, "Reviewer", BaseRole.EMPLOYEE)

        assert (await role_catalog.find_role("Reviewer", tenant_id)).id == shadow.id
        assert (await role_catalog.find_role("Reviewer", other_tenant_id)).base_role == BaseRole.MANAGER


class TestPermissionCache:

    @pytest.mark.asyncio
    async def test_resolution_is_cached(self, role_catalog, permission_cache, tenant_id):
        await role_catalog.resolve_permissions("Employee", tenant_id)
        await role_catalog.resolve_permissions("Employee", tenant_id)
        assert permission_cache.hits == 1
        assert len(permission_cache) == 1

    @pytest.mark.asyncio
    async def test_grant_change_is_visible_immediately(self, role_catalog, admin, employee, make_principal):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        clerk = make_principal(BaseRole.EMPLOYEE, role_name="Clerk")
        assert not await role_catalog.has_permission(clerk, PermissionKey.FILES_EXPORT)

        await role_catalog.set_permissions(admin, role.id, {"files.export": True})
        assert await role_catalog.has_permission(clerk, PermissionKey.FILES_EXPORT)

        await role_catalog.reset_permission(admin, role.id, "files.export")
        assert not await role_catalog.has_permission(clerk, PermissionKey.FILES_EXPORT)

    @pytest.mark.asyncio
    async def test_shadowing_role_invalidates_cached_global_entry(
        self, role_catalog, super_admin, admin, make_principal
    ):
        await role_catalog.create_role(super_admin, "Reviewer", BaseRole.MANAGER, is_global=True)
        reviewer = make_principal(BaseRole.EMPLOYEE, role_name="Reviewer")
        assert await role_catalog.has_permission(reviewer, PermissionKey.FILES_LOCK)

        await role_catalog.create_role(admin, "Reviewer", BaseRole.EMPLOYEE)
        assert not await role_catalog.has_permission(reviewer, PermissionKey.FILES_LOCK)

    @pytest.mark.asyncio
    async def test_global_role_change_clears_every_tenant(
        self, role_catalog, permission_cache, super_admin, tenant_id, other_tenant_id
    ):
        role = await role_catalog.create_role(super_admin, "Reviewer", BaseRole.MANAGER, is_global=True)
        await role_catalog.resolve_permissions("Reviewer", tenant_id)
        await role_catalog.resolve_permissions("Reviewer", other_tenant_id)
        assert len(permission_cache) == 2

        await role_catalog.set_permissions(super_admin, role.id, {"files.lock": False})
        assert len(permission_cache) == 0

    @pytest.mark.asyncio
    async def test_revoke_during_resolution_is_not_overwritten(self, permission_cache, audit, admin, tenant_id):
        repository = InterleavingRoleRepository()
        catalog = RoleCatalog(repository, permission_cache, audit=audit)
        role = await catalog.create_role(admin, "Auditor", BaseRole.EMPLOYEE)

        repository.after_read = lambda: catalog.set_permissions(admin, role.id, {"files.view": False})
        in_flight = await catalog.resolve_permissions("Auditor", tenant_id)
        assert in_flight[PermissionKey.FILES_VIEW].granted

        resolved = await catalog.resolve_permissions("Auditor", tenant_id)
        assert resolved[PermissionKey.FILES_VIEW] == ResolvedPermission(PermissionKey.FILES_VIEW, False, False)

    @pytest.mark.asyncio
    async def test_generation_advances_on_every_mutation(self, role_catalog, permission_cache, admin):
        before = await permission_cache.generation()
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        await role_catalog.set_permissions(admin, role.id, {"files.export": True})
        await role_catalog.reset_permission(admin, role.id, "files.export")
        assert await permission_cache.generation() >= before + 3

    @pytest.mark.asyncio
    async def test_rename_invalidates_old_and_new_names(self, role_catalog, admin, tenant_id):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        await role_catalog.resolve_permissions("Clerk", tenant_id)

        await role_catalog.update_role(admin, role.id, name="Registrar")
        with pytest.raises(RoleNotFoundError):
            await role_catalog.resolve_permissions("Clerk", tenant_id)
        assert (await role_catalog.resolve_permissions("Registrar", tenant_id))[PermissionKey.FILES_VIEW].granted


class TestRoleLookup:

    @pytest.mark.asyncio
    async def test_other_tenants_role_looks_absent(self, role_catalog, admin, make_principal, other_tenant_id):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        outsider = make_principal(BaseRole.ADMIN, tenant=other_tenant_id)
        with pytest.raises(ScopeViolationError) as exc_info:
            await role_catalog.get_role(outsider, role.id)
        assert exc_info.value.public_view().error_code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_super_admin_sees_every_tenant_role(self, role_catalog, admin, super_admin):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        assert (await role_catalog.get_role(super_admin, role.id)).name == "Clerk"

    @pytest.mark.asyncio
    async def test_missing_role(self, role_catalog, admin):
        with pytest.raises(RoleNotFoundError):
            await role_catalog.get_role(admin, RoleId.generate())

    @pytest.mark.asyncio
    async def test_list_roles(self, role_catalog, admin, manager, employee):
        await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        names = [r.name for r in await role_catalog.list_roles(manager)]
        assert names[:4] == ["Admin", "Employee", "Manager", "SuperAdmin"]
        assert "Clerk" in names

        tenant_only = await role_catalog.list_roles(manager, include_global=False)
        assert [r.name for r in tenant_only] == ["Clerk"]

        with pytest.raises(ForbiddenError):
            await role_catalog.list_roles(employee)

    @pytest.mark.asyncio
    async def test_role_permissions_are_sorted(self, role_catalog, role_repository, manager):
        role = await _system_role(role_repository, BaseRole.EMPLOYEE)
        resolved = await role_catalog.get_role_permissions(manager, role.id)
        keys = [r.permission.value for r in resolved]
        assert keys == sorted(keys)
        assert len(keys) == len(ALL_PERMISSIONS)

    def test_granted_keys_keeps_only_granted(self):
        resolved = [
            ResolvedPermission(PermissionKey.FILES_VIEW, True, True),
            ResolvedPermission(PermissionKey.AUDIT_VIEW, False, False),
        ]
        assert granted_keys(resolved) == frozenset({PermissionKey.FILES_VIEW})


class TestRoleAdministration:

    @pytest.mark.asyncio
    async def test_create_role_is_audited(self, role_catalog, admin, audit_sink, tenant_id):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE, description="Front desk")
        assert role.tenant_id == tenant_id
        assert not role.is_system
        assert role.level == BaseRole.EMPLOYEE.level

        events = audit_sink.find(AuditAction.ROLE_CREATE)
        assert len(events) == 1
        assert events[0].metadata["base_role"] == "Employee"

    @pytest.mark.asyncio
    async def test_create_requires_roles_manage(self, role_catalog, manager):
        with pytest.raises(ForbiddenError):
            await role_catalog.create_role(manager, "Clerk", BaseRole.EMPLOYEE)

    @pytest.mark.asyncio
    async def test_duplicate_name_in_tenant(self, role_catalog, admin):
        await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        with pytest.raises(ConflictError):
            await role_catalog.create_role(admin, "Clerk", BaseRole.MANAGER)

    @pytest.mark.asyncio
    async def test_same_name_in_two_tenants(self, role_catalog, admin, make_principal, other_tenant_id):
        other_admin = make_principal(BaseRole.ADMIN, tenant=other_tenant_id)
        first = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        second = await role_catalog.create_role(other_admin, "Clerk", BaseRole.EMPLOYEE)
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_base_role_names_are_reserved(self, role_catalog, admin):
        with pytest.raises(ConflictError):
            await role_catalog.create_role(admin, "Manager", BaseRole.EMPLOYEE)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "-leading", "x" * 101, "semi;colon"])
    async def test_invalid_names(self, role_catalog, admin, name):
        with pytest.raises(ValidationError):
            await role_catalog.create_role(admin, name, BaseRole.EMPLOYEE)

    @pytest.mark.asyncio
    async def test_unknown_base_role(self, role_catalog, admin):
        with pytest.raises(ValidationError):
            await role_catalog.create_role(admin, "Clerk", "Owner")

    @pytest.mark.asyncio
    async def test_cannot_create_above_own_tier(self, role_catalog, admin):
        with pytest.raises(ForbiddenError) as exc_info:
            await role_catalog.create_role(admin, "Root", BaseRole.SUPER_ADMIN)
        assert exc_info.value.reason == "role_above_caller"

    @pytest.mark.asyncio
    async def test_global_roles_need_super_admin(self, role_catalog, admin):
        with pytest.raises(ForbiddenError):
            await role_catalog.create_role(admin, "Reviewer", BaseRole.MANAGER, is_global=True)

    @pytest.mark.asyncio
    async def test_cannot_grant_unheld_permission(self, role_catalog, admin):
        with pytest.raises(ForbiddenError) as exc_info:
            await role_catalog.create_role(
                admin, "Operator", BaseRole.ADMIN, permissions={"tenants.manage": True}
            )
        assert exc_info.value.reason == "grant_exceeds_caller"

    @pytest.mark.asyncio
    async def test_revoking_is_always_allowed(self, role_catalog, admin, tenant_id):
        await role_catalog.create_role(admin, "Viewer", BaseRole.EMPLOYEE, permissions={"files.upload": False})
        resolved = await role_catalog.resolve_permissions("Viewer", tenant_id)
        assert not resolved[PermissionKey.FILES_UPLOAD].granted

    @pytest.mark.asyncio
    async def test_unknown_grant_key(self, role_catalog, admin):
        with pytest.raises(ValidationError) as exc_info:
            await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE, permissions={"files.burn": True})
        assert exc_info.value.details["unknown"] == ["files.burn"]

    @pytest.mark.asyncio
    async def test_non_boolean_grant(self, role_catalog, admin):
        with pytest.raises(ValidationError):
            await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE, permissions={"files.view": "yes"})

    @pytest.mark.asyncio
    async def test_base_role_cannot_change(self, role_catalog, admin):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        with pytest.raises(ValidationError):
            await role_catalog.update_role(admin, role.id, base_role=BaseRole.MANAGER)
        updated = await role_catalog.update_role(admin, role.id, base_role="Employee", description="Desk")
        assert updated.description == "Desk"

    @pytest.mark.asyncio
    async def test_system_roles_are_immutable(self, role_catalog, role_repository, super_admin):
        role = await _system_role(role_repository, BaseRole.MANAGER)
        with pytest.raises(ForbiddenError):
            await role_catalog.update_role(super_admin, role.id, name="Lead")
        with pytest.raises(ForbiddenError):
            await role_catalog.delete_role(super_admin, role.id)
        with pytest.raises(ForbiddenError):
            await role_catalog.set_permissions(super_admin, role.id, {"files.lock": False})

    @pytest.mark.asyncio
    async def test_admin_cannot_modify_global_role(self, role_catalog, super_admin, admin):
        role = await role_catalog.create_role(super_admin, "Reviewer", BaseRole.MANAGER, is_global=True)
        with pytest.raises(ForbiddenError) as exc_info:
            await role_catalog.set_permissions(admin, role.id, {"files.share": False})
        assert exc_info.value.reason == "global_role"

    @pytest.mark.asyncio
    async def test_super_admin_based_role_takes_no_overrides(self, role_catalog, super_admin):
        role = await role_catalog.create_role(super_admin, "Root", BaseRole.SUPER_ADMIN)
        with pytest.raises(ValidationError):
            await role_catalog.set_permissions(super_admin, role.id, {"files.view": False})

    @pytest.mark.asyncio
    async def test_set_permissions_returns_resolved_set(self, role_catalog, admin):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        resolved = await role_catalog.set_permissions(admin, role.id, {"files.share": True})
        by_key = {r.permission: r for r in resolved}
        assert by_key[PermissionKey.FILES_SHARE] == ResolvedPermission(PermissionKey.FILES_SHARE, True, False)
        assert by_key[PermissionKey.FILES_VIEW].inherited

    @pytest.mark.asyncio
    async def test_reset_permission_falls_back_to_default(self, role_catalog, admin):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE, permissions={"files.view": False})
        reset = await role_catalog.reset_permission(admin, role.id, "files.view")
        assert reset == ResolvedPermission(PermissionKey.FILES_VIEW, True, True)

    @pytest.mark.asyncio
    async def test_delete_role_in_use(self, role_catalog, role_repository, admin, tenant_id, employee):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        role_repository.assign(employee.user_id, tenant_id, "Clerk")
        with pytest.raises(RoleInUseError):
            await role_catalog.delete_role(admin, role.id)

        role_repository.unassign(employee.user_id)
        await role_catalog.delete_role(admin, role.id)
        with pytest.raises(RoleNotFoundError):
            await role_catalog.get_role(admin, role.id)

    @pytest.mark.asyncio
    async def test_audit_records_each_mutation(self, role_catalog, admin, audit_sink):
        role = await role_catalog.create_role(admin, "Clerk", BaseRole.EMPLOYEE)
        await role_catalog.update_role(admin, role.id, name="Registrar")
        await role_catalog.set_permissions(admin, role.id, {"files.share": True})
        await role_catalog.delete_role(admin, role.id)

        assert [e.action for e in audit_sink.events] == [
            AuditAction.ROLE_CREATE,
            AuditAction.ROLE_UPDATE,
            AuditAction.ROLE_PERMISSIONS_UPDATE,
            AuditAction.ROLE_DELETE,
        ]
        assert audit_sink.events[1].metadata["previous_name"] == "Clerk"
