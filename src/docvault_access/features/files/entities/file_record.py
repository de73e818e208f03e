"""File and folder record entity.

``tenant_id`` never changes after creation. Lock fields are only changed by
the LockManager through a FileLockStore, each transition producing a new
record with ``lock_version`` incremented.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ....config.constants import BaseRole, Visibility
from ....core.value_objects import DepartmentId, FileId, TenantId, UserId


@dataclass(frozen=True)
class LockState:
    """Lock state of a file: ``Unlocked`` or ``Locked(by, role, password)``."""

    is_locked: bool = False
    locked_by: Optional[UserId] = None
    locked_at: Optional[datetime] = None
    required_role: Optional[BaseRole] = None
    password_hash: Optional[str] = None

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    @classmethod
    def unlocked(cls) -> "LockState":
        return cls()


@dataclass(frozen=True)
class FileRecord:
    """A file or folder as seen by the access engine."""

    id: FileId
    tenant_id: TenantId
    owner_id: UserId
    name: str = ""
    parent_id: Optional[FileId] = None
    department_id: Optional[DepartmentId] = None
    visibility: Visibility = Visibility.DEPARTMENT
    is_directory: bool = False
    is_company_folder: bool = False
    is_locked: bool = False
    locked_by: Optional[UserId] = None
    locked_at: Optional[datetime] = None
    lock_password_hash: Optional[str] = None
    lock_required_role: Optional[BaseRole] = None
    lock_version: int = 0

    @property
    def lock_state(self) -> LockState:
        if not self.is_locked:
            return LockState.unlocked()
        return LockState(
            is_locked=True,
            locked_by=self.locked_by,
            locked_at=self.locked_at,
            required_role=self.lock_required_role,
            password_hash=self.lock_password_hash,
        )

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id

    def with_lock(self, state: LockState) -> "FileRecord":
        """Copy of this record carrying ``state`` and the next lock version."""
        return replace(
            self,
            is_locked=state.is_locked,
            locked_by=state.locked_by,
            locked_at=state.locked_at,
            lock_password_hash=state.password_hash,
            lock_required_role=state.required_role,
            lock_version=self.lock_version + 1,
        )
