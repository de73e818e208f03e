"""Exceptions module for docvault-access.

Complete exception hierarchy for the authorization engine.
"""

from .base import (
    DocVaultError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Configuration / Infrastructure
    ConfigurationError,
    DatabaseError,
    CacheError,

    # Lookup
    NotFoundError,
    RoleNotFoundError,
    FileNotFoundError,

    # Authorization
    ForbiddenError,
    ScopeViolationError,
    InsufficientRoleError,
    WrongPasswordError,
    ComplianceLockedError,

    # Lock state
    LockStateError,
    AlreadyLockedError,
    NotLockedError,

    # Input / Conflict
    ValidationError,
    ConflictError,
    RoleInUseError,
)

from .http_mapping import (
    HTTP_STATUS_MAP,
    HttpStatusMapper,
    set_status_overrides,
)

__all__ = [
    "DocVaultError",
    "get_http_status_code",
    "create_error_response",
    "ConfigurationError",
    "DatabaseError",
    "CacheError",
    "NotFoundError",
    "RoleNotFoundError",
    "FileNotFoundError",
    "ForbiddenError",
    "ScopeViolationError",
    "InsufficientRoleError",
    "WrongPasswordError",
    "ComplianceLockedError",
    "LockStateError",
    "AlreadyLockedError",
    "NotLockedError",
    "ValidationError",
    "ConflictError",
    "RoleInUseError",
    "HTTP_STATUS_MAP",
    "HttpStatusMapper",
    "set_status_overrides",
]
