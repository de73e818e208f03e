"""Role catalog service.

Stores role definitions and per-role permission overrides, and computes the
effective permission set of a role: base-role defaults overlaid with explicit
grant rows. Reads are served through an explicit RolePermissionCache which
every mutation invalidates before returning.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ....config.constants import BaseRole, PermissionKey, get_base_permissions
from ....core.exceptions import (
    ConflictError,
    ForbiddenError,
    RoleInUseError,
    RoleNotFoundError,
    ScopeViolationError,
    ValidationError,
)
from ....core.value_objects import RoleId, TenantId
from ...audit.entities import AuditAction, AuditOutcome
from ...tenants.entities import PrincipalContext
from ..entities import (
    ResolvedPermission,
    Role,
    RolePermissionCache,
    RoleRepository,
    parse_grants,
    parse_permission,
    validate_role_name,
)

logger = logging.getLogger(__name__)


def _parse_base_role(value: Any) -> BaseRole:
    if isinstance(value, BaseRole):
        return value
    try:
        return BaseRole.parse(str(value))
    except ValueError as e:
        raise ValidationError(str(e), field="base_role")


class RoleCatalog:
    """Service orchestrating role lookups, permission resolution and role writes."""

    def __init__(
        self,
        role_repo: RoleRepository,
        cache: RolePermissionCache,
        audit=None,
    ):
        self.role_repo = role_repo
        self.cache = cache
        self.audit = audit

    # Resolution

    async def find_role(self, role_name: str, tenant_id: Optional[TenantId]) -> Role:
        """Role visible under ``role_name`` from ``tenant_id``."""
        role = await self.role_repo.find_by_name(role_name, tenant_id)
        if role is None:
            raise RoleNotFoundError(role_name)
        return role

    async def _compute_permissions(self, role: Role) -> Dict[PermissionKey, ResolvedPermission]:
        if role.is_super_admin_based:
            return {p: ResolvedPermission(p, True, True) for p in PermissionKey}

        defaults = get_base_permissions(role.base_role)
        overrides = {g.permission: g.granted for g in await self.role_repo.get_grants(role.id)}

        resolved = {}
        for permission in PermissionKey:
            if permission in overrides:
                resolved[permission] = ResolvedPermission(permission, overrides[permission], False)
            else:
                resolved[permission] = ResolvedPermission(permission, permission in defaults, True)
        return resolved

    async def resolve_permissions(
        self,
        role_name: str,
        tenant_id: TenantId,
    ) -> Dict[PermissionKey, ResolvedPermission]:
        """Effective permission map of a role as seen from a tenant."""
        cached = await self.cache.get(tenant_id, role_name)
        if cached is not None:
            return cached

        # Read before computing; a mutation landing mid-compute voids the write.
        generation = await self.cache.generation()
        role = await self.find_role(role_name, tenant_id)
        resolved = await self._compute_permissions(role)
        await self.cache.set(tenant_id, role_name, resolved, generation=generation)
        return resolved

    async def has_permission(self, principal: PrincipalContext, permission: Any) -> bool:
        """Check a permission for the principal's active role."""
        key = parse_permission(permission)
        if principal.is_suspended:
            return False
        resolved = await self.resolve_permissions(principal.role_name, principal.tenant_id)
        entry = resolved.get(key)
        return bool(entry and entry.granted)

    async def require_permission(self, principal: PrincipalContext, permission: Any) -> None:
        key = parse_permission(permission)
        if not await self.has_permission(principal, key):
            raise ForbiddenError(
                f"Permission '{key.value}' required",
                reason="missing_permission",
                details={"permission": key.value},
            )

    # Role lookup

    async def get_role(self, principal: PrincipalContext, role_id: RoleId) -> Role:
        """Get a role by id, hiding roles owned by other tenants."""
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        if role.tenant_id is not None and role.tenant_id != principal.tenant_id and not principal.is_super_admin:
            raise ScopeViolationError("role", role_id)
        return role

    async def list_roles(self, principal: PrincipalContext, include_global: bool = True) -> List[Role]:
        await self.require_permission(principal, PermissionKey.ROLES_VIEW)
        return await self.role_repo.list_roles(principal.tenant_id, include_global)

    async def get_role_permissions(self, principal: PrincipalContext, role_id: RoleId) -> List[ResolvedPermission]:
        """Resolved permissions of a role, with inherited flags, ordered by key."""
        role = await self.get_role(principal, role_id)
        await self.require_permission(principal, PermissionKey.ROLES_VIEW)
        resolved = await self._compute_permissions(role)
        return sorted(resolved.values(), key=lambda r: r.permission.value)

    # Role administration

    def _check_manageable(self, principal: PrincipalContext, role: Role) -> None:
        if role.is_system:
            raise ForbiddenError(f"System role '{role.name}' cannot be modified", reason="system_role")
        if role.is_global and not principal.is_super_admin:
            raise ForbiddenError("Only a SuperAdmin may modify global roles", reason="global_role")
        if role.base_role > principal.base_role:
            raise ForbiddenError("Cannot modify a role above your own tier", reason="role_above_caller")

    async def _ensure_name_available(self, name: str, tenant_id: Optional[TenantId]) -> None:
        if any(name == base.value for base in BaseRole):
            raise ConflictError(f"Role name '{name}' is reserved", details={"name": name})
        if await self.role_repo.exists_in_scope(name, tenant_id):
            raise ConflictError(f"Role '{name}' already exists", details={"name": name})

    async def _invalidate(self, role: Role, *names: str) -> None:
        if role.is_global:
            await self.cache.clear()
            return
        for name in set(names) or {role.name}:
            await self.cache.invalidate_role(role.tenant_id, name)

    async def _audit(self, principal: PrincipalContext, action: str, role: Role, **metadata: Any) -> None:
        if self.audit is not None:
            await self.audit.record(
                principal, action, "role", role.id, AuditOutcome.SUCCESS,
                tenant_id=role.tenant_id or principal.tenant_id, role_name=role.name, **metadata,
            )

    async def create_role(
        self,
        principal: PrincipalContext,
        name: str,
        base_role: Any,
        description: Optional[str] = None,
        permissions: Optional[Mapping[str, bool]] = None,
        is_global: bool = False,
    ) -> Role:
        """Create a custom role in the caller's tenant, or a global one (SuperAdmin only)."""
        await self.require_permission(principal, PermissionKey.ROLES_MANAGE)
        name = validate_role_name(name)
        base = _parse_base_role(base_role)

        if is_global and not principal.is_super_admin:
            raise ForbiddenError("Only a SuperAdmin may create global roles", reason="global_role")
        if base > principal.base_role:
            raise ForbiddenError("Cannot create a role above your own tier", reason="role_above_caller")

        grants = {}
        if permissions:
            if base == BaseRole.SUPER_ADMIN:
                raise ValidationError("SuperAdmin roles cannot carry permission overrides", field="permissions")
            grants = parse_grants(permissions)
            await self._check_grantable(principal, grants)

        tenant_id = None if is_global else principal.tenant_id
        await self._ensure_name_available(name, tenant_id)

        role = Role(
            id=RoleId.generate(),
            name=name,
            base_role=base,
            tenant_id=tenant_id,
            description=description,
        )
        created = await self.role_repo.create(role, grants)
        await self._invalidate(created, created.name)
        logger.info(f"Created role {created.name} (base={base.value}) in {tenant_id or 'global scope'}")
        await self._audit(principal, AuditAction.ROLE_CREATE, created, base_role=base.value)
        return created

    async def update_role(
        self,
        principal: PrincipalContext,
        role_id: RoleId,
        name: Optional[str] = None,
        description: Optional[str] = None,
        base_role: Any = None,
    ) -> Role:
        """Rename or re-describe a custom role. ``base_role`` cannot change."""
        role = await self.get_role(principal, role_id)
        await self.require_permission(principal, PermissionKey.ROLES_MANAGE)

        if base_role is not None and _parse_base_role(base_role) != role.base_role:
            raise ValidationError("A role's base role cannot be changed after creation", field="base_role")
        self._check_manageable(principal, role)

        old_name = role.name
        if name is not None:
            name = validate_role_name(name)
            if name != old_name:
                await self._ensure_name_available(name, role.tenant_id)
                role.name = name
        if description is not None:
            role.description = description

        updated = await self.role_repo.update(role)
        await self._invalidate(updated, old_name, updated.name)
        logger.info(f"Updated role {role_id} ({old_name} -> {updated.name})")
        await self._audit(principal, AuditAction.ROLE_UPDATE, updated, previous_name=old_name)
        return updated

    async def delete_role(self, principal: PrincipalContext, role_id: RoleId) -> None:
        role = await self.get_role(principal, role_id)
        await self.require_permission(principal, PermissionKey.ROLES_MANAGE)
        if role.is_system:
            raise ForbiddenError(f"System role '{role.name}' cannot be deleted", reason="system_role")
        self._check_manageable(principal, role)

        assignees = await self.role_repo.count_assignees(role)
        if assignees:
            raise RoleInUseError(role.name, assignees)

        await self.role_repo.delete(role.id)
        await self._invalidate(role, role.name)
        logger.info(f"Deleted role {role.name} ({role_id})")
        await self._audit(principal, AuditAction.ROLE_DELETE, role)

    async def _check_grantable(self, principal: PrincipalContext, grants: Mapping[PermissionKey, bool]) -> None:
        # Granting requires holding the permission yourself.
        for permission, granted in grants.items():
            if granted and not await self.has_permission(principal, permission):
                raise ForbiddenError(
                    f"Cannot grant '{permission.value}' without holding it",
                    reason="grant_exceeds_caller",
                    details={"permission": permission.value},
                )

    async def _writable_role(self, principal: PrincipalContext, role_id: RoleId) -> Role:
        role = await self.get_role(principal, role_id)
        await self.require_permission(principal, PermissionKey.ROLES_MANAGE)
        if role.is_system:
            raise ForbiddenError(f"System role '{role.name}' permissions cannot be changed", reason="system_role")
        if role.is_super_admin_based:
            raise ValidationError("SuperAdmin roles cannot carry permission overrides", field="permissions")
        self._check_manageable(principal, role)
        return role

    async def set_permissions(
        self,
        principal: PrincipalContext,
        role_id: RoleId,
        grants: Mapping[str, bool],
    ) -> List[ResolvedPermission]:
        """Write explicit overrides for a role and return its new resolved set."""
        role = await self._writable_role(principal, role_id)
        parsed = parse_grants(grants)
        await self._check_grantable(principal, parsed)

        await self.role_repo.upsert_grants(role.id, parsed)
        await self._invalidate(role, role.name)
        logger.info(f"Updated {len(parsed)} permission override(s) on role {role.name}")
        await self._audit(
            principal, AuditAction.ROLE_PERMISSIONS_UPDATE, role,
            grants={p.value: g for p, g in parsed.items()},
        )
        resolved = await self._compute_permissions(role)
        return sorted(resolved.values(), key=lambda r: r.permission.value)

    async def reset_permission(self, principal: PrincipalContext, role_id: RoleId, permission: Any) -> ResolvedPermission:
        """Drop an override so the permission falls back to the base default."""
        role = await self._writable_role(principal, role_id)
        key = parse_permission(permission)

        await self.role_repo.delete_grant(role.id, key)
        await self._invalidate(role, role.name)
        await self._audit(principal, AuditAction.ROLE_PERMISSIONS_UPDATE, role, reset=key.value)
        return ResolvedPermission(key, key in get_base_permissions(role.base_role), True)
