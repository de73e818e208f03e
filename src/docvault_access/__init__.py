"""DocVault Access - authorization and file-lock engine for multi-tenant
document management.

Role-based permissions with per-tenant custom roles, strict tenant
isolation, department visibility, password-protected file locks and
compliance-mode setting overlays.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    AccessSettings,
    BaseRole,
    ComplianceMode,
    PermissionKey,
    SettingName,
    get_settings,
)

from .core.exceptions import (
    DocVaultError,
    NotFoundError,
    ForbiddenError,
    ScopeViolationError,
    InsufficientRoleError,
    WrongPasswordError,
    ComplianceLockedError,
    AlreadyLockedError,
    NotLockedError,
    ValidationError,
    ConflictError,
    RoleInUseError,
)

from .core.value_objects import UserId, TenantId, DepartmentId, RoleId, FileId

__all__ = [
    "__version__",
    "AccessSettings",
    "BaseRole",
    "ComplianceMode",
    "PermissionKey",
    "SettingName",
    "get_settings",
    "DocVaultError",
    "NotFoundError",
    "ForbiddenError",
    "ScopeViolationError",
    "InsufficientRoleError",
    "WrongPasswordError",
    "ComplianceLockedError",
    "AlreadyLockedError",
    "NotLockedError",
    "ValidationError",
    "ConflictError",
    "RoleInUseError",
    "UserId",
    "TenantId",
    "DepartmentId",
    "RoleId",
    "FileId",
]
