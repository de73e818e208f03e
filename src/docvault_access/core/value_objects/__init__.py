"""Value objects module for docvault-access."""

from .identifiers import (
    UserId,
    TenantId,
    DepartmentId,
    RoleId,
    FileId,
)

__all__ = [
    "UserId",
    "TenantId",
    "DepartmentId",
    "RoleId",
    "FileId",
]
