"""Role domain entity for the permissions feature.

A role is either a global system role (one per base tier, immutable), a
global custom role created by a SuperAdmin, or a custom role owned by exactly
one tenant. Its hierarchy position is always that of its ``base_role``.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ....config.constants import BaseRole
from ....core.exceptions import ValidationError
from ....core.value_objects import RoleId, TenantId


_ROLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 _.-]*$")
MAX_ROLE_NAME_LENGTH = 100


def validate_role_name(name: str) -> str:
    """Normalize and validate a role name."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Role name cannot be empty", field="name")
    if len(name) > MAX_ROLE_NAME_LENGTH:
        raise ValidationError(
            f"Role name cannot exceed {MAX_ROLE_NAME_LENGTH} characters, got: {len(name)}",
            field="name",
        )
    if not _ROLE_NAME_PATTERN.match(name):
        raise ValidationError(f"Role name contains invalid characters: {name}", field="name")
    return name


@dataclass
class Role:
    """Domain entity representing a system or custom role."""

    id: RoleId
    name: str
    base_role: BaseRole
    tenant_id: Optional[TenantId] = None
    description: Optional[str] = None
    is_system: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.name = validate_role_name(self.name)
        if not isinstance(self.base_role, BaseRole):
            try:
                self.base_role = BaseRole.parse(self.base_role)
            except ValueError as e:
                raise ValidationError(str(e), field="base_role")
        if self.is_system and self.tenant_id is not None:
            raise ValidationError("System roles cannot belong to a tenant", field="tenant_id")

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None

    @property
    def level(self) -> int:
        """Hierarchy level, always the base role's level."""
        return self.base_role.level

    @property
    def is_super_admin_based(self) -> bool:
        return self.base_role == BaseRole.SUPER_ADMIN

    def is_visible_to(self, tenant_id: TenantId) -> bool:
        """Whether members of ``tenant_id`` may resolve this role by name."""
        return self.is_global or self.tenant_id == tenant_id

    def __str__(self) -> str:
        scope = "global" if self.is_global else str(self.tenant_id)
        return f"Role({self.name}, base={self.base_role.value}, scope={scope})"


def system_role(base_role: BaseRole, role_id: Optional[RoleId] = None) -> Role:
    """Build the global system role for a base tier."""
    return Role(
        id=role_id or RoleId.generate(),
        name=base_role.value,
        base_role=base_role,
        description=f"Built-in {base_role.value} role",
        is_system=True,
    )
