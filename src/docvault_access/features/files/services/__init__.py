"""File access services."""

from .file_access_evaluator import FileAccessEvaluator
from .lock_manager import LockManager
from .password_hasher import LockPasswordHasher

__all__ = ["FileAccessEvaluator", "LockManager", "LockPasswordHasher"]
