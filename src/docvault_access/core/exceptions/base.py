"""Base exceptions for docvault-access.

This module defines the root of the exception hierarchy. All exceptions
inherit from DocVaultError and carry an error code, details, and an HTTP
status code mapping for API responses.
"""

from typing import Any, Dict, Optional


class DocVaultError(Exception):
    """Base exception for all docvault-access errors.

    Every error raised by the engine is a local, recoverable, caller-facing
    error kind carrying structured information for logging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def public_view(self) -> "DocVaultError":
        """Error as it may be shown to the caller."""
        return self


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception using the configured mapping."""
    from .http_mapping import get_http_status_code as get_mapped_status_code
    return get_mapped_status_code(exception)


def create_error_response(exception: DocVaultError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Errors that must not reveal whether a resource exists in another tenant
    expose the public shape of a plain NotFoundError instead of their own.
    """
    public = exception.public_view()
    return {
        "error": {
            "code": public.error_code,
            "message": public.message,
            "details": public.details,
            "type": public.__class__.__name__,
        }
    }
