"""File lock store implementations."""

from .file_lock_store import AsyncPGFileLockStore
from .memory_store import InMemoryFileLockStore

__all__ = ["AsyncPGFileLockStore", "InMemoryFileLockStore"]
