"""HTTP status code mapping for exceptions.

Static exception-to-status mapping with per-instance overrides, walking the
class hierarchy so subclasses inherit their parent's status.
"""

from typing import Any, Dict, Mapping, Optional, Type

from .base import DocVaultError
from .domain import (
    AlreadyLockedError,
    CacheError,
    ComplianceLockedError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    InsufficientRoleError,
    LockStateError,
    NotFoundError,
    NotLockedError,
    RoleInUseError,
    ScopeViolationError,
    ValidationError,
    WrongPasswordError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 403 Forbidden
    ForbiddenError: 403,
    InsufficientRoleError: 403,
    WrongPasswordError: 403,
    ComplianceLockedError: 403,

    # 404 Not Found (cross-tenant denials are indistinguishable from absence)
    NotFoundError: 404,
    ScopeViolationError: 404,

    # 409 Conflict
    ConflictError: 409,
    RoleInUseError: 409,
    LockStateError: 409,
    NotLockedError: 409,

    # 422 Unprocessable Entity
    ValidationError: 422,

    # 423 Locked
    AlreadyLockedError: 423,

    # 500 Internal Server Error
    DatabaseError: 500,
    CacheError: 500,
    ConfigurationError: 500,

    # Default
    DocVaultError: 500,
}


class HttpStatusMapper:
    """Exception-to-status-code mapper with optional overrides."""

    def __init__(self, overrides: Optional[Mapping[str, int]] = None):
        """Initialize with optional overrides keyed by exception class name."""
        self._overrides = dict(overrides or {})
        self._cache: Dict[Type[Exception], int] = {}

    def get_status_code(self, exception: Exception) -> int:
        exception_type = type(exception)

        if exception_type in self._cache:
            return self._cache[exception_type]

        status_code = 500
        for klass in exception_type.__mro__:
            if klass.__name__ in self._overrides:
                status_code = int(self._overrides[klass.__name__])
                break
            if klass in HTTP_STATUS_MAP:
                status_code = HTTP_STATUS_MAP[klass]
                break

        self._cache[exception_type] = status_code
        return status_code

    def clear_cache(self) -> None:
        """Clear the status code cache after overrides change."""
        self._cache.clear()

    def get_mapping_stats(self) -> Dict[str, Any]:
        return {
            "cached_mappings": len(self._cache),
            "default_mappings": len(HTTP_STATUS_MAP),
            "overrides": dict(self._overrides),
        }


_global_mapper: Optional[HttpStatusMapper] = None


def get_mapper() -> HttpStatusMapper:
    """Get or create the global HTTP status mapper."""
    global _global_mapper
    if _global_mapper is None:
        _global_mapper = HttpStatusMapper()
    return _global_mapper


def set_status_overrides(overrides: Mapping[str, int]) -> None:
    """Replace the global mapper with one using the given overrides."""
    global _global_mapper
    _global_mapper = HttpStatusMapper(overrides)


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Cross-tenant denials report the status of their public view so they
    cannot be told apart from missing resources.
    """
    if isinstance(exception, DocVaultError):
        exception = exception.public_view()
    return get_mapper().get_status_code(exception)
