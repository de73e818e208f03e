"""Configuration for docvault-access."""

from .constants import (
    ALL_PERMISSIONS,
    BASE_ROLE_DEFAULTS,
    DEFAULT_TENANT_SETTINGS,
    DEFAULT_UNLOCK_ROLE,
    LOCK_REQUIRABLE_ROLES,
    BaseRole,
    CacheKeys,
    CacheTTL,
    ComplianceMode,
    DatabaseTables,
    PermissionKey,
    SettingName,
    UserStatus,
    Visibility,
    get_base_permissions,
)
from .settings import AccessSettings, get_settings
from .logging_config import setup_logging, get_logger

__all__ = [
    "ALL_PERMISSIONS",
    "BASE_ROLE_DEFAULTS",
    "DEFAULT_TENANT_SETTINGS",
    "DEFAULT_UNLOCK_ROLE",
    "LOCK_REQUIRABLE_ROLES",
    "BaseRole",
    "CacheKeys",
    "CacheTTL",
    "ComplianceMode",
    "DatabaseTables",
    "PermissionKey",
    "SettingName",
    "UserStatus",
    "Visibility",
    "get_base_permissions",
    "AccessSettings",
    "get_settings",
    "setup_logging",
    "get_logger",
]
