"""Role administration router."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ....core.value_objects import RoleId
from ...tenants.entities import PrincipalContext
from ...tenants.routers import get_current_principal, parse_identifier
from ..models import (
    PermissionGrantsRequest,
    ResolvedPermissionResponse,
    RoleCreateRequest,
    RolePermissionsResponse,
    RoleResponse,
    RoleUpdateRequest,
)
from ..services import RoleCatalog


logger = logging.getLogger(__name__)

role_router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
    responses={
        403: {"description": "Operation not permitted"},
        404: {"description": "Role not found"},
    },
)


def get_role_catalog() -> RoleCatalog:
    """Placeholder for role catalog dependency.

    Applications must override this via:
    app.dependency_overrides[get_role_catalog] = lambda: catalog
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Role catalog not configured. Application must provide RoleCatalog implementation.",
    )


def _role_id(role_id: str) -> RoleId:
    return parse_identifier(RoleId, role_id, "role_id")


def _permissions_response(role_id: RoleId, resolved) -> RolePermissionsResponse:
    return RolePermissionsResponse.from_resolved(str(role_id), list(resolved))


@role_router.get("", response_model=List[RoleResponse])
async def list_roles(
    include_global: bool = Query(True, description="Include global roles"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> List[RoleResponse]:
    """List roles visible to the caller's tenant."""
    roles = await catalog.list_roles(principal, include_global=include_global)
    return [RoleResponse.from_role(role) for role in roles]


@role_router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    request: RoleCreateRequest,
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> RoleResponse:
    """Create a custom role."""
    role = await catalog.create_role(
        principal,
        name=request.name,
        base_role=request.base_role,
        description=request.description,
        permissions=request.permissions,
        is_global=request.is_global,
    )
    return RoleResponse.from_role(role)


@role_router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str = Path(..., description="Role ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> RoleResponse:
    """Get role by ID."""
    return RoleResponse.from_role(await catalog.get_role(principal, _role_id(role_id)))


@role_router.patch("/{role_id}", response_model=RoleResponse)
async def update_role(
    request: RoleUpdateRequest,
    role_id: str = Path(..., description="Role ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> RoleResponse:
    """Rename or re-describe a custom role."""
    role = await catalog.update_role(
        principal,
        _role_id(role_id),
        name=request.name,
        description=request.description,
        base_role=request.base_role,
    )
    return RoleResponse.from_role(role)


@role_router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: str = Path(..., description="Role ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> None:
    """Delete a custom role that has no assignees."""
    await catalog.delete_role(principal, _role_id(role_id))


@role_router.get("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def get_role_permissions(
    role_id: str = Path(..., description="Role ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> RolePermissionsResponse:
    """Resolved permissions of a role with inherited flags."""
    rid = _role_id(role_id)
    return _permissions_response(rid, await catalog.get_role_permissions(principal, rid))


@role_router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def set_role_permissions(
    request: PermissionGrantsRequest,
    role_id: str = Path(..., description="Role ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> RolePermissionsResponse:
    """Write explicit permission overrides."""
    rid = _role_id(role_id)
    return _permissions_response(rid, await catalog.set_permissions(principal, rid, request.grants))


@role_router.delete("/{role_id}/permissions/{permission}", response_model=ResolvedPermissionResponse)
async def reset_role_permission(
    role_id: str = Path(..., description="Role ID"),
    permission: str = Path(..., description="Permission key"),
    principal: PrincipalContext = Depends(get_current_principal),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> ResolvedPermissionResponse:
    """Drop an override so the permission falls back to its base default."""
    resolved = await catalog.reset_permission(principal, _role_id(role_id), permission)
    return ResolvedPermissionResponse.from_resolved(resolved)
