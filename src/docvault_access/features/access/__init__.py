"""Access feature: the AccessEngine facade over every authorization stage."""

from .services import AccessEngine, FILE_OPERATION_PERMISSIONS

__all__ = ["AccessEngine", "FILE_OPERATION_PERMISSIONS"]
