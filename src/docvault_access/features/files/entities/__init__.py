"""File entities."""

from .file_record import FileRecord, LockState
from .access import AccessDecision, DenialReason, FileOperation
from .protocols import FileLockStore

__all__ = [
    "FileRecord",
    "LockState",
    "AccessDecision",
    "DenialReason",
    "FileOperation",
    "FileLockStore",
]
