"""Permissions feature for docvault-access.

Feature-first layout for role and permission management:
- entities/: Role, PermissionGrant, ResolvedPermission and protocols
- services/: RoleCatalog
- cache/: RolePermissionCache backends (memory, redis)
- repositories/: role persistence (asyncpg, in-memory)
"""

from .entities import (
    PermissionGrant,
    ResolvedPermission,
    Role,
    RolePermissionCache,
    RoleRepository,
)
from .services import RoleCatalog
from .cache import MemoryPermissionCache, RedisPermissionCache
from .repositories import AsyncPGRoleRepository, InMemoryRoleRepository

__all__ = [
    "PermissionGrant",
    "ResolvedPermission",
    "Role",
    "RolePermissionCache",
    "RoleRepository",
    "RoleCatalog",
    "MemoryPermissionCache",
    "RedisPermissionCache",
    "AsyncPGRoleRepository",
    "InMemoryRoleRepository",
]
