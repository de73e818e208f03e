"""In-memory FileLockStore used for tests and single-process deployments."""

import asyncio
from typing import Dict, Optional

from ....core.value_objects import FileId
from ..entities import FileRecord, LockState


class InMemoryFileLockStore:
    """Dictionary-backed FileLockStore with an asyncio.Lock around the version check."""

    def __init__(self):
        self._files: Dict[FileId, FileRecord] = {}
        self._lock = asyncio.Lock()

    def add(self, file: FileRecord) -> FileRecord:
        self._files[file.id] = file
        return file

    async def get(self, file_id: FileId) -> Optional[FileRecord]:
        return self._files.get(file_id)

    async def compare_and_set_lock(
        self,
        file_id: FileId,
        expected_version: int,
        state: LockState,
    ) -> Optional[FileRecord]:
        async with self._lock:
            current = self._files.get(file_id)
            if current is None or current.lock_version != expected_version:
                return None
            updated = current.with_lock(state)
            self._files[file_id] = updated
            return updated
