"""In-memory RoleRepository used for tests and single-process deployments."""

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Tuple

from ....config.constants import BaseRole, PermissionKey
from ....core.exceptions import ConflictError
from ....core.value_objects import RoleId, TenantId, UserId
from ..entities import PermissionGrant, Role, system_role


class InMemoryRoleRepository:
    """Dictionary-backed implementation of RoleRepository protocol."""

    def __init__(self, seed_system_roles: bool = True):
        self._roles: Dict[RoleId, Role] = {}
        self._grants: Dict[RoleId, Dict[PermissionKey, bool]] = {}
        # user -> (tenant, role name)
        self._assignments: Dict[UserId, Tuple[TenantId, str]] = {}
        if seed_system_roles:
            for base_role in BaseRole:
                role = system_role(base_role)
                self._roles[role.id] = role

    def assign(self, user_id: UserId, tenant_id: TenantId, role_name: str) -> None:
        """Record a user's role assignment."""
        self._assignments[user_id] = (tenant_id, role_name)

    def unassign(self, user_id: UserId) -> None:
        self._assignments.pop(user_id, None)

    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        return self._roles.get(role_id)

    async def find_by_name(self, name: str, tenant_id: Optional[TenantId]) -> Optional[Role]:
        global_match = None
        for role in self._roles.values():
            if role.name != name:
                continue
            if tenant_id is not None and role.tenant_id == tenant_id:
                return role
            if role.is_global:
                global_match = role
        return global_match

    async def exists_in_scope(self, name: str, tenant_id: Optional[TenantId]) -> bool:
        return any(r.name == name and r.tenant_id == tenant_id for r in self._roles.values())

    async def list_roles(self, tenant_id: Optional[TenantId], include_global: bool = True) -> List[Role]:
        roles = [
            r for r in self._roles.values()
            if r.tenant_id == tenant_id or (include_global and r.is_global)
        ]
        return sorted(roles, key=lambda r: (not r.is_system, r.name))

    async def create(self, role: Role, grants: Optional[Mapping[PermissionKey, bool]] = None) -> Role:
        if await self.exists_in_scope(role.name, role.tenant_id):
            raise ConflictError(f"Role '{role.name}' already exists", details={"name": role.name})
        self._roles[role.id] = role
        self._grants[role.id] = dict(grants or {})
        return role

    async def update(self, role: Role) -> Role:
        role.updated_at = datetime.now(timezone.utc)
        self._roles[role.id] = role
        return role

    async def delete(self, role_id: RoleId) -> bool:
        self._grants.pop(role_id, None)
        return self._roles.pop(role_id, None) is not None

    async def count_assignees(self, role: Role) -> int:
        counts = Counter()
        for tenant_id, role_name in self._assignments.values():
            resolved = await self.find_by_name(role_name, tenant_id)
            if resolved is not None:
                counts[resolved.id] += 1
        return counts[role.id]

    async def get_grants(self, role_id: RoleId) -> List[PermissionGrant]:
        return [
            PermissionGrant(role_id=role_id, permission=permission, granted=granted)
            for permission, granted in self._grants.get(role_id, {}).items()
        ]

    async def upsert_grants(self, role_id: RoleId, grants: Mapping[PermissionKey, bool]) -> None:
        self._grants.setdefault(role_id, {}).update(grants)

    async def delete_grant(self, role_id: RoleId, permission: PermissionKey) -> bool:
        return self._grants.get(role_id, {}).pop(permission, None) is not None
