"""Persistence contract for file lock state."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from ....core.value_objects import FileId
from .file_record import FileRecord, LockState


@runtime_checkable
class FileLockStore(Protocol):
    """Reads file records and commits lock transitions atomically."""

    @abstractmethod
    async def get(self, file_id: FileId) -> Optional[FileRecord]:
        """Get a file record by id regardless of tenant."""
        ...

    @abstractmethod
    async def compare_and_set_lock(
        self,
        file_id: FileId,
        expected_version: int,
        state: LockState,
    ) -> Optional[FileRecord]:
        """Write ``state`` only if the stored version still equals ``expected_version``.

        Returns the updated record, or None when another transition won.
        """
        ...
