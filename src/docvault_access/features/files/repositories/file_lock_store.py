"""AsyncPG-based file lock store.

Lock transitions are a single conditional UPDATE guarded by ``lock_version``,
so two concurrent transitions on the same file can never both commit.
"""

import logging
from typing import Optional

import asyncpg

from ....config.constants import BaseRole, DatabaseTables, Visibility
from ....core.exceptions import DatabaseError
from ....core.value_objects import DepartmentId, FileId, TenantId, UserId
from ..entities import FileRecord, LockState


logger = logging.getLogger(__name__)

_FILE_COLUMNS = """
    id, tenant_id, name, parent_id, department_id, owner_id, visibility,
    is_directory, is_company_folder, is_locked, locked_by, locked_at,
    lock_password_hash, lock_required_role, lock_version
"""


class AsyncPGFileLockStore:
    """AsyncPG implementation of FileLockStore protocol."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    @property
    def _files(self) -> str:
        return f"{self.schema}.{DatabaseTables.FILES}"

    def _build_file_from_row(self, row: asyncpg.Record) -> FileRecord:
        """Build FileRecord entity from database row."""
        return FileRecord(
            id=FileId(row["id"]),
            tenant_id=TenantId(row["tenant_id"]),
            name=row["name"],
            parent_id=FileId(row["parent_id"]) if row["parent_id"] else None,
            department_id=DepartmentId(row["department_id"]) if row["department_id"] else None,
            owner_id=UserId(row["owner_id"]),
            visibility=Visibility(row["visibility"]),
            is_directory=row["is_directory"],
            is_company_folder=row["is_company_folder"],
            is_locked=row["is_locked"],
            locked_by=UserId(row["locked_by"]) if row["locked_by"] else None,
            locked_at=row["locked_at"],
            lock_password_hash=row["lock_password_hash"],
            lock_required_role=BaseRole.parse(row["lock_required_role"]) if row["lock_required_role"] else None,
            lock_version=row["lock_version"],
        )

    async def get(self, file_id: FileId) -> Optional[FileRecord]:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_FILE_COLUMNS} FROM {self._files} WHERE id = $1",
                    file_id.value,
                )
            return self._build_file_from_row(row) if row else None
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to load file {file_id}: {e}")
            raise DatabaseError(f"Failed to retrieve file: {e}")

    async def compare_and_set_lock(
        self,
        file_id: FileId,
        expected_version: int,
        state: LockState,
    ) -> Optional[FileRecord]:
        query = f"""
            UPDATE {self._files}
            SET is_locked = $3,
                locked_by = $4,
                locked_at = $5,
                lock_password_hash = $6,
                lock_required_role = $7,
                lock_version = lock_version + 1
            WHERE id = $1 AND lock_version = $2
            RETURNING {_FILE_COLUMNS}
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    file_id.value,
                    expected_version,
                    state.is_locked,
                    state.locked_by.value if state.locked_by else None,
                    state.locked_at,
                    state.password_hash,
                    state.required_role.value if state.required_role else None,
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update lock state of file {file_id}: {e}")
            raise DatabaseError(f"Failed to update lock state: {e}")

        return self._build_file_from_row(row) if row else None
