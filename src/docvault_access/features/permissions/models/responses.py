"""Role response models for API endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..entities import ResolvedPermission, Role, granted_keys


class RoleResponse(BaseModel):
    """Response model for role information."""

    id: str = Field(..., description="Role ID")
    name: str
    base_role: str
    tenant_id: Optional[str] = Field(None, description="Owning tenant, null for global roles")
    description: Optional[str] = None
    is_system: bool
    level: int = Field(..., description="Hierarchy level of the base role")
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_role(cls, role: Role) -> "RoleResponse":
        return cls(
            id=str(role.id),
            name=role.name,
            base_role=role.base_role.value,
            tenant_id=str(role.tenant_id) if role.tenant_id else None,
            description=role.description,
            is_system=role.is_system,
            level=role.level,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class ResolvedPermissionResponse(BaseModel):
    permission: str
    granted: bool
    inherited: bool

    @classmethod
    def from_resolved(cls, resolved: ResolvedPermission) -> "ResolvedPermissionResponse":
        return cls(**resolved.to_dict())


class RolePermissionsResponse(BaseModel):
    """Resolved permission set of a role."""

    role_id: str
    permissions: List[ResolvedPermissionResponse]
    granted: List[str] = Field(default_factory=list, description="Keys whose final value is granted")

    @classmethod
    def from_resolved(cls, role_id: str, resolved: List[ResolvedPermission]) -> "RolePermissionsResponse":
        return cls(
            role_id=role_id,
            permissions=[ResolvedPermissionResponse.from_resolved(r) for r in resolved],
            granted=sorted(key.value for key in granted_keys(resolved)),
        )
