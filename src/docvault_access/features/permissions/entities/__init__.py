"""Permission entities and protocols."""

from .role import Role, system_role, validate_role_name
from .permission import (
    PermissionGrant,
    ResolvedPermission,
    ResolvedPermissions,
    granted_keys,
    parse_grants,
    parse_permission,
)
from .protocols import RoleRepository, RolePermissionCache

__all__ = [
    "Role",
    "system_role",
    "validate_role_name",
    "PermissionGrant",
    "ResolvedPermission",
    "ResolvedPermissions",
    "granted_keys",
    "parse_grants",
    "parse_permission",
    "RoleRepository",
    "RolePermissionCache",
]
