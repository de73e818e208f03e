"""Core building blocks for docvault-access: exceptions and value objects."""

from .exceptions import DocVaultError, create_error_response, get_http_status_code
from .value_objects import UserId, TenantId, DepartmentId, RoleId, FileId

__all__ = [
    "DocVaultError",
    "create_error_response",
    "get_http_status_code",
    "UserId",
    "TenantId",
    "DepartmentId",
    "RoleId",
    "FileId",
]
