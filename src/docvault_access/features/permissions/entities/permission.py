"""Permission grant and resolved permission value objects."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

from ....config.constants import PermissionKey
from ....core.exceptions import ValidationError
from ....core.value_objects import RoleId


def parse_permission(value: Any) -> PermissionKey:
    """Validate a permission identifier, rejecting unknown keys."""
    if isinstance(value, PermissionKey):
        return value
    try:
        return PermissionKey.parse(str(value))
    except ValueError as e:
        raise ValidationError(str(e), field="permission", details={"permission": str(value)})


def parse_grants(grants: Mapping[Any, Any]) -> Dict[PermissionKey, bool]:
    """Validate a permission -> bool mapping for a write."""
    parsed: Dict[PermissionKey, bool] = {}
    unknown: List[str] = []
    for key, granted in grants.items():
        try:
            permission = parse_permission(key)
        except ValidationError:
            unknown.append(str(key))
            continue
        if not isinstance(granted, bool):
            raise ValidationError(
                f"Grant for '{permission.value}' must be a boolean",
                field="granted",
                details={"permission": permission.value},
            )
        parsed[permission] = granted

    if unknown:
        raise ValidationError(
            f"Unknown permission(s): {', '.join(sorted(unknown))}",
            field="permission",
            details={"unknown": sorted(unknown)},
        )
    return parsed


@dataclass(frozen=True)
class PermissionGrant:
    """Sparse override row: an explicit grant or revoke for one role."""

    role_id: RoleId
    permission: PermissionKey
    granted: bool


@dataclass(frozen=True)
class ResolvedPermission:
    """Final value of one permission for a role.

    ``inherited`` is informational only: True when no override row exists.
    """

    permission: PermissionKey
    granted: bool
    inherited: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "permission": self.permission.value,
            "granted": self.granted,
            "inherited": self.inherited,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResolvedPermission":
        return cls(
            permission=PermissionKey(data["permission"]),
            granted=bool(data["granted"]),
            inherited=bool(data["inherited"]),
        )


ResolvedPermissions = Dict[PermissionKey, ResolvedPermission]


def granted_keys(resolved: Iterable[ResolvedPermission]) -> frozenset:
    """Permission keys whose final value is granted."""
    return frozenset(r.permission for r in resolved if r.granted)
