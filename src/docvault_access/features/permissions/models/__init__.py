"""Role request and response models."""

from .requests import PermissionGrantsRequest, RoleCreateRequest, RoleUpdateRequest
from .responses import ResolvedPermissionResponse, RolePermissionsResponse, RoleResponse

__all__ = [
    "PermissionGrantsRequest",
    "RoleCreateRequest",
    "RoleUpdateRequest",
    "ResolvedPermissionResponse",
    "RolePermissionsResponse",
    "RoleResponse",
]
