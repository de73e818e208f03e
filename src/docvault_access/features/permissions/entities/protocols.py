"""Protocol interfaces for permission feature dependency injection.

Defines contracts for role persistence and for the role permission cache.
"""

from abc import abstractmethod
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from ....config.constants import PermissionKey
from ....core.value_objects import RoleId, TenantId
from .permission import PermissionGrant, ResolvedPermission
from .role import Role


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role and permission grant data access."""

    @abstractmethod
    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Get role by ID regardless of tenant."""
        ...

    @abstractmethod
    async def find_by_name(self, name: str, tenant_id: Optional[TenantId]) -> Optional[Role]:
        """Find a role by name as seen from a tenant.

        A role owned by ``tenant_id`` shadows a global role of the same name.
        """
        ...

    @abstractmethod
    async def exists_in_scope(self, name: str, tenant_id: Optional[TenantId]) -> bool:
        """Whether a role with this name exists in exactly this scope."""
        ...

    @abstractmethod
    async def list_roles(self, tenant_id: Optional[TenantId], include_global: bool = True) -> List[Role]:
        """List roles owned by a tenant, optionally with global roles."""
        ...

    @abstractmethod
    async def create(self, role: Role, grants: Optional[Mapping[PermissionKey, bool]] = None) -> Role:
        """Persist a new role together with its initial grants."""
        ...

    @abstractmethod
    async def update(self, role: Role) -> Role:
        """Update name and description of an existing role."""
        ...

    @abstractmethod
    async def delete(self, role_id: RoleId) -> bool:
        """Delete a role and its grants."""
        ...

    @abstractmethod
    async def count_assignees(self, role: Role) -> int:
        """Number of users currently assigned to the role."""
        ...

    @abstractmethod
    async def get_grants(self, role_id: RoleId) -> List[PermissionGrant]:
        """Get all override rows for a role."""
        ...

    @abstractmethod
    async def upsert_grants(self, role_id: RoleId, grants: Mapping[PermissionKey, bool]) -> None:
        """Insert or replace override rows for a role."""
        ...

    @abstractmethod
    async def delete_grant(self, role_id: RoleId, permission: PermissionKey) -> bool:
        """Remove one override row so the permission falls back to its default."""
        ...


@runtime_checkable
class RolePermissionCache(Protocol):
    """Protocol for the resolved-permission cache.

    Entries are keyed by (requesting tenant, role name). Mutations must call
    one of the invalidation methods before returning. Each invalidation
    advances ``generation``; ``set`` with a generation that is no longer
    current is a no-op.
    """

    @abstractmethod
    async def generation(self) -> int:
        """Current invalidation generation."""
        ...

    @abstractmethod
    async def get(self, tenant_id: TenantId, role_name: str) -> Optional[Dict[PermissionKey, ResolvedPermission]]:
        """Get cached resolved permissions."""
        ...

    @abstractmethod
    async def set(
        self,
        tenant_id: TenantId,
        role_name: str,
        permissions: Mapping[PermissionKey, ResolvedPermission],
        ttl: Optional[int] = None,
        generation: Optional[int] = None,
    ) -> None:
        """Cache resolved permissions unless invalidated since ``generation``."""
        ...

    @abstractmethod
    async def invalidate_role(self, tenant_id: TenantId, role_name: str) -> None:
        """Drop the entry for one role as seen from one tenant."""
        ...

    @abstractmethod
    async def invalidate_tenant(self, tenant_id: TenantId) -> None:
        """Drop every entry resolved for a tenant."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""
        ...
