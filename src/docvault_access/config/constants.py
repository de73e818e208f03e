"""Constants and enumerations for docvault-access.

Single source of truth for the role hierarchy, the closed set of permission
keys, the base-role default permission table, and cache key/TTL conventions.
"""

from enum import Enum
from typing import Final, FrozenSet, Mapping


class CacheKeys:
    """Cache key templates."""

    ROLE_PERMISSIONS: Final[str] = "role:permissions:{tenant_id}:{role_name}"
    ROLE_PERMISSIONS_TENANT_PATTERN: Final[str] = "role:permissions:{tenant_id}:*"
    ROLE_PERMISSIONS_PATTERN: Final[str] = "role:permissions:*"
    ROLE_PERMISSIONS_GENERATION: Final[str] = "role:generation"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS_SHORT: Final[int] = 30
    PERMISSIONS_LONG: Final[int] = 300


class DatabaseTables:
    """Table names used by the asyncpg repositories."""

    ROLES: Final[str] = "roles"
    ROLE_PERMISSIONS: Final[str] = "role_permissions"
    USERS: Final[str] = "users"
    FILES: Final[str] = "files_metadata"
    TENANT_COMPLIANCE: Final[str] = "tenant_compliance_settings"


class BaseRole(str, Enum):
    """The four fixed hierarchy tiers, ordered Employee < Manager < Admin < SuperAdmin.

    The total order is defined here once; every hierarchy comparison in the
    package goes through ``level`` or the rich comparison operators.
    """

    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    ADMIN = "Admin"
    SUPER_ADMIN = "SuperAdmin"

    @property
    def level(self) -> int:
        return _ROLE_ORDER.index(self)

    def at_least(self, other: "BaseRole") -> bool:
        return self.level >= other.level

    def __ge__(self, other):
        if not isinstance(other, BaseRole):
            return NotImplemented
        return self.level >= other.level

    def __gt__(self, other):
        if not isinstance(other, BaseRole):
            return NotImplemented
        return self.level > other.level

    def __le__(self, other):
        if not isinstance(other, BaseRole):
            return NotImplemented
        return self.level <= other.level

    def __lt__(self, other):
        if not isinstance(other, BaseRole):
            return NotImplemented
        return self.level < other.level

    @classmethod
    def parse(cls, value: str) -> "BaseRole":
        """Parse a base role name, raising ValueError for unknown names."""
        for role in cls:
            if role.value == value:
                return role
        raise ValueError(f"Unknown base role: {value!r}")


_ROLE_ORDER = (
    BaseRole.EMPLOYEE,
    BaseRole.MANAGER,
    BaseRole.ADMIN,
    BaseRole.SUPER_ADMIN,
)


class PermissionKey(str, Enum):
    """Closed enumeration of permission identifiers."""

    FILES_VIEW = "files.view"
    FILES_UPLOAD = "files.upload"
    FILES_DOWNLOAD = "files.download"
    FILES_DELETE = "files.delete"
    FILES_SHARE = "files.share"
    FILES_LOCK = "files.lock"
    FILES_EXPORT = "files.export"
    REQUESTS_CREATE = "requests.create"
    REQUESTS_VIEW = "requests.view"
    USERS_VIEW = "users.view"
    USERS_INVITE = "users.invite"
    USERS_EDIT = "users.edit"
    USERS_DELETE = "users.delete"
    USERS_SUSPEND = "users.suspend"
    ROLES_VIEW = "roles.view"
    ROLES_MANAGE = "roles.manage"
    AUDIT_VIEW = "audit.view"
    AUDIT_EXPORT = "audit.export"
    SETTINGS_VIEW = "settings.view"
    SETTINGS_EDIT = "settings.edit"
    TENANTS_MANAGE = "tenants.manage"

    @property
    def resource(self) -> str:
        return self.value.split(".")[0]

    @property
    def action(self) -> str:
        return self.value.split(".")[1]

    @classmethod
    def parse(cls, value: str) -> "PermissionKey":
        """Parse a permission key, raising ValueError for unknown keys."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown permission: {value!r}") from None


ALL_PERMISSIONS: Final[FrozenSet[PermissionKey]] = frozenset(PermissionKey)


def _by_resource(*resources: str) -> FrozenSet[PermissionKey]:
    return frozenset(p for p in PermissionKey if p.resource in resources)


BASE_ROLE_DEFAULTS: Final[Mapping[BaseRole, FrozenSet[PermissionKey]]] = {
    BaseRole.SUPER_ADMIN: ALL_PERMISSIONS,
    BaseRole.ADMIN: ALL_PERMISSIONS - {PermissionKey.TENANTS_MANAGE},
    BaseRole.MANAGER: _by_resource("files", "requests") | {PermissionKey.ROLES_VIEW},
    BaseRole.EMPLOYEE: frozenset({
        PermissionKey.FILES_VIEW,
        PermissionKey.FILES_UPLOAD,
        PermissionKey.FILES_DOWNLOAD,
        PermissionKey.REQUESTS_CREATE,
        PermissionKey.REQUESTS_VIEW,
    }),
}


def get_base_permissions(base_role: BaseRole) -> FrozenSet[PermissionKey]:
    """Default permission set implied by a base role."""
    return BASE_ROLE_DEFAULTS[base_role]


# Roles a lock may require for unlocking; SuperAdmin can always unlock.
LOCK_REQUIRABLE_ROLES: Final[FrozenSet[BaseRole]] = frozenset({
    BaseRole.EMPLOYEE,
    BaseRole.MANAGER,
    BaseRole.ADMIN,
})

# Minimum tier that may unlock a lock carrying no role requirement.
DEFAULT_UNLOCK_ROLE: Final[BaseRole] = BaseRole.MANAGER


class UserStatus(str, Enum):
    """Principal account status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class Visibility(str, Enum):
    """File/folder access class."""

    DEPARTMENT = "department"
    PRIVATE = "private"


class ComplianceMode(str, Enum):
    """Tenant-wide regulatory posture."""

    STANDARD = "Standard"
    HIPAA = "HIPAA"
    SOX = "SOX"
    GDPR = "GDPR"

    @property
    def label(self) -> str:
        return {
            ComplianceMode.STANDARD: "Standard",
            ComplianceMode.HIPAA: "HIPAA Secure",
            ComplianceMode.SOX: "SOX Governed",
            ComplianceMode.GDPR: "GDPR Active",
        }[self]

    @classmethod
    def parse(cls, value: str) -> "ComplianceMode":
        """Normalize a compliance mode name ("SOC2" is accepted for SOX)."""
        normalized = (value or "").strip().upper()
        aliases = {
            "HIPAA": cls.HIPAA,
            "SOX": cls.SOX,
            "SOC2": cls.SOX,
            "GDPR": cls.GDPR,
            "STANDARD": cls.STANDARD,
            "NONE": cls.STANDARD,
            "": cls.STANDARD,
        }
        if normalized not in aliases:
            raise ValueError(f"Unknown compliance mode: {value!r}")
        return aliases[normalized]


class SettingName:
    """Names of tenant settings governed by compliance modes."""

    MFA_REQUIRED: Final[str] = "mfa_required"
    SESSION_TIMEOUT_MINUTES: Final[str] = "session_timeout_minutes"
    PUBLIC_SHARING_ENABLED: Final[str] = "public_sharing_enabled"
    AUDIT_LOGGING_ENABLED: Final[str] = "audit_logging_enabled"
    RETENTION_POLICY_DAYS: Final[str] = "retention_policy_days"
    EXPORT_LOGGING_ENABLED: Final[str] = "export_logging_enabled"
    FILE_VERSIONING_ENABLED: Final[str] = "file_versioning_enabled"
    DELETION_REQUESTS_ALLOWED: Final[str] = "deletion_requests_allowed"
    CONSENT_TRACKING_ENABLED: Final[str] = "consent_tracking_enabled"

    ALL: Final[FrozenSet[str]] = frozenset({
        MFA_REQUIRED,
        SESSION_TIMEOUT_MINUTES,
        PUBLIC_SHARING_ENABLED,
        AUDIT_LOGGING_ENABLED,
        RETENTION_POLICY_DAYS,
        EXPORT_LOGGING_ENABLED,
        FILE_VERSIONING_ENABLED,
        DELETION_REQUESTS_ALLOWED,
        CONSENT_TRACKING_ENABLED,
    })


DEFAULT_TENANT_SETTINGS: Final[Mapping[str, object]] = {
    SettingName.MFA_REQUIRED: False,
    SettingName.SESSION_TIMEOUT_MINUTES: 60,
    SettingName.PUBLIC_SHARING_ENABLED: True,
    SettingName.AUDIT_LOGGING_ENABLED: True,
    SettingName.RETENTION_POLICY_DAYS: 90,
    SettingName.EXPORT_LOGGING_ENABLED: False,
    SettingName.FILE_VERSIONING_ENABLED: False,
    SettingName.DELETION_REQUESTS_ALLOWED: True,
    SettingName.CONSENT_TRACKING_ENABLED: False,
}
