"""Access services."""

from .access_engine import AccessEngine, FILE_OPERATION_PERMISSIONS

__all__ = ["AccessEngine", "FILE_OPERATION_PERMISSIONS"]
