"""Role request models for API endpoints."""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class RoleCreateRequest(BaseModel):
    """Request model for creating a custom role."""

    name: str = Field(..., min_length=1, max_length=100, description="Role name, unique within its scope")
    base_role: str = Field(..., description="Base tier: Employee, Manager, Admin or SuperAdmin")
    description: Optional[str] = Field(None, max_length=500, description="Role description")
    permissions: Optional[Dict[str, bool]] = Field(None, description="Initial permission overrides")
    is_global: bool = Field(False, description="Create a global role (SuperAdmin only)")


class RoleUpdateRequest(BaseModel):
    """Request model for updating a custom role. ``base_role`` may only repeat the current value."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    base_role: Optional[str] = Field(None, description="Must equal the role's current base role")


class PermissionGrantsRequest(BaseModel):
    """Request model for writing permission overrides."""

    grants: Dict[str, bool] = Field(..., description="Permission key to granted flag")
