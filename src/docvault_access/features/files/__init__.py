"""Files feature: per-file access evaluation and the lock state machine.

- entities/: FileRecord, LockState, FileOperation, AccessDecision
- services/: FileAccessEvaluator, LockManager, LockPasswordHasher
- repositories/: FileLockStore implementations
- routers/: FastAPI endpoints
"""

from .entities import (
    AccessDecision,
    DenialReason,
    FileLockStore,
    FileOperation,
    FileRecord,
    LockState,
)
from .services import FileAccessEvaluator, LockManager, LockPasswordHasher
from .repositories import AsyncPGFileLockStore, InMemoryFileLockStore

__all__ = [
    "AccessDecision",
    "DenialReason",
    "FileLockStore",
    "FileOperation",
    "FileRecord",
    "LockState",
    "FileAccessEvaluator",
    "LockManager",
    "LockPasswordHasher",
    "AsyncPGFileLockStore",
    "InMemoryFileLockStore",
]
