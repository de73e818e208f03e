"""Domain-specific exceptions for docvault-access.

Error kinds surfaced by the authorization engine. None of them is fatal;
callers map them to responses with ``http_mapping``.
"""

from typing import Any, Dict, Optional

from .base import DocVaultError


# Configuration Errors
class ConfigurationError(DocVaultError):
    """Raised when required configuration is missing or invalid at startup."""
    pass


# Infrastructure Errors
class DatabaseError(DocVaultError):
    """Raised when a persistence call fails."""
    pass


class CacheError(DocVaultError):
    """Raised when a permission cache backend fails."""
    pass


# Lookup Errors
class NotFoundError(DocVaultError):
    """Resource absent, or out of the principal's tenant scope.

    Both cases must look the same to the caller.
    """

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Any = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message or f"{resource_type.capitalize()} not found",
            error_code="NOT_FOUND",
            details=details,
        )

    def public_view(self) -> DocVaultError:
        return NotFoundError(self.resource_type)


class RoleNotFoundError(NotFoundError):
    """Raised when a role does not exist."""

    def __init__(self, role: Any = None):
        super().__init__("role", role)


class FileNotFoundError(NotFoundError):
    """Raised when a file or folder does not exist."""

    def __init__(self, file_id: Any = None):
        super().__init__("file", file_id)


# Authorization Errors
class ForbiddenError(DocVaultError):
    """In-scope resource, insufficient permission."""

    def __init__(
        self,
        message: str = "Operation not permitted",
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if reason:
            details.setdefault("reason", reason)
        self.reason = reason
        super().__init__(message, error_code="FORBIDDEN", details=details)


class ScopeViolationError(ForbiddenError):
    """Resource exists but belongs to a tenant outside the principal's scope.

    Kept distinct internally for logging and audit, but rendered exactly like
    a NotFoundError so existence in another tenant never leaks.
    """

    def __init__(self, resource_type: str = "resource", resource_id: Any = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type.capitalize()} is outside the principal's tenant scope",
            reason="out_of_scope",
        )

    def public_view(self) -> DocVaultError:
        return NotFoundError(self.resource_type)


class InsufficientRoleError(ForbiddenError):
    """Principal's role is below the tier required to unlock a file."""

    def __init__(self, message: str = "Insufficient role to unlock this file", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, reason="insufficient_role", details=details)
        self.error_code = "INSUFFICIENT_ROLE"


class WrongPasswordError(ForbiddenError):
    """Supplied unlock password does not verify against the lock."""

    def __init__(self, message: str = "Incorrect lock password"):
        super().__init__(message, reason="wrong_password", details={"requires_password": True})
        self.error_code = "WRONG_PASSWORD"


class ComplianceLockedError(ForbiddenError):
    """Attempted to change a setting locked by the tenant's compliance mode."""

    def __init__(self, setting: str, mode: str, forced_value: Any = None):
        self.setting = setting
        self.mode = mode
        super().__init__(
            f"Setting '{setting}' is locked by {mode} compliance mode",
            reason="compliance_locked",
            details={"setting": setting, "mode": mode, "forced_value": forced_value},
        )
        self.error_code = "COMPLIANCE_LOCKED"


# Lock State Errors
class LockStateError(DocVaultError):
    """Base class for invalid lock transitions."""
    pass


class AlreadyLockedError(LockStateError):
    """Lock requested on a file that is already locked."""

    def __init__(self, file_id: Any = None, locked_by: Any = None):
        details = {"file_id": str(file_id)} if file_id is not None else {}
        if locked_by is not None:
            details["locked_by"] = str(locked_by)
        super().__init__("File is already locked", error_code="ALREADY_LOCKED", details=details)


class NotLockedError(LockStateError):
    """Unlock requested on a file that is not locked."""

    def __init__(self, file_id: Any = None):
        details = {"file_id": str(file_id)} if file_id is not None else {}
        super().__init__("File is not locked", error_code="NOT_LOCKED", details=details)


# Input Errors
class ValidationError(DocVaultError):
    """Malformed role/permission/setting input."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details)


class ConflictError(DocVaultError):
    """Operation conflicts with existing data."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFLICT", details=details)


class RoleInUseError(ConflictError):
    """Role cannot be deleted while users are assigned to it."""

    def __init__(self, role_name: str, assignees: int):
        super().__init__(
            f"Role '{role_name}' is assigned to {assignees} user(s)",
            details={"assignees": assignees},
        )
