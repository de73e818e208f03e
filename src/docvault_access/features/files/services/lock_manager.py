"""File lock state machine.

``Unlocked -> Locked`` via ``lock`` and ``Locked -> Unlocked`` via ``unlock``.
Both transitions commit through the store's compare-and-set on
``lock_version``; losing a race is reported as a typed error and never
retried. Failed attempts never change state. Every attempt is audited.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ....config.constants import DEFAULT_UNLOCK_ROLE, LOCK_REQUIRABLE_ROLES, BaseRole
from ....core.exceptions import (
    AlreadyLockedError,
    DocVaultError,
    FileNotFoundError,
    ForbiddenError,
    InsufficientRoleError,
    LockStateError,
    NotFoundError,
    NotLockedError,
    ValidationError,
    WrongPasswordError,
)
from ....core.value_objects import FileId
from ...audit.entities import AuditAction, AuditOutcome
from ...audit.services import AuditEmitter
from ...tenants.entities import PrincipalContext
from ..entities import (
    AccessDecision,
    DenialReason,
    FileLockStore,
    FileOperation,
    FileRecord,
    LockState,
)
from .file_access_evaluator import FileAccessEvaluator
from .password_hasher import LockPasswordHasher

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _raise_for_decision(decision: AccessDecision, file: FileRecord) -> None:
    if decision.allowed:
        return
    if decision.reason == DenialReason.OUT_OF_SCOPE:
        raise NotFoundError("file", file.id)
    raise ForbiddenError(decision.reason.message, reason=decision.reason.value)


def _parse_required_role(value: Any) -> Optional[BaseRole]:
    if value is None or value == "":
        return None
    try:
        role = value if isinstance(value, BaseRole) else BaseRole.parse(str(value))
    except ValueError as e:
        raise ValidationError(str(e), field="required_role")
    if role not in LOCK_REQUIRABLE_ROLES:
        raise ValidationError(
            f"A lock may require Employee, Manager or Admin, not {role.value}",
            field="required_role",
        )
    return role


class LockManager:
    """Owns lock/unlock transitions for individual files."""

    def __init__(
        self,
        store: FileLockStore,
        evaluator: FileAccessEvaluator,
        hasher: LockPasswordHasher,
        audit: AuditEmitter,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.evaluator = evaluator
        self.hasher = hasher
        self.audit = audit
        self.clock = clock

    async def load(self, principal: PrincipalContext, file_id: FileId) -> FileRecord:
        """Fetch a file, treating out-of-scope files as absent."""
        file = await self.store.get(file_id)
        if file is None:
            raise FileNotFoundError(file_id)
        self.evaluator.scope_guard.require_in_scope(principal, file.tenant_id, "file", file_id)
        return file

    @staticmethod
    def can_attempt_unlock(principal: PrincipalContext, file: FileRecord) -> bool:
        """Unlock eligibility, independent of the password."""
        if principal.is_super_admin:
            return True
        if file.is_owned_by(principal.user_id) or file.locked_by == principal.user_id:
            return True
        return principal.at_least(file.lock_required_role or DEFAULT_UNLOCK_ROLE)

    async def lock(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        password: Optional[str] = None,
        required_role: Any = None,
    ) -> FileRecord:
        try:
            locked = await self._lock(principal, file, password, required_role)
        except DocVaultError as e:
            await self._record_failure(principal, AuditAction.FILE_LOCK, file, e)
            raise

        await self.audit.record(
            principal, AuditAction.FILE_LOCK, "file", file.id, AuditOutcome.SUCCESS,
            tenant_id=file.tenant_id,
            required_role=locked.lock_required_role.value if locked.lock_required_role else None,
            password_protected=locked.lock_password_hash is not None,
        )
        logger.info(f"File {file.id} locked by {principal.user_id}")
        return locked

    async def _lock(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        password: Optional[str],
        required_role: Any,
    ) -> FileRecord:
        _raise_for_decision(self.evaluator.evaluate(principal, file, FileOperation.LOCK), file)

        if file.is_locked:
            raise AlreadyLockedError(file.id, file.locked_by)

        role = _parse_required_role(required_role)
        password_hash = None
        if password:
            password_hash = await asyncio.to_thread(self.hasher.hash, password)

        state = LockState(
            is_locked=True,
            locked_by=principal.user_id,
            locked_at=self.clock(),
            required_role=role,
            password_hash=password_hash,
        )
        updated = await self.store.compare_and_set_lock(file.id, file.lock_version, state)
        if updated is None:
            logger.info(f"Lock race lost on file {file.id} by {principal.user_id}")
            raise AlreadyLockedError(file.id)
        return updated

    async def unlock(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        password: Optional[str] = None,
    ) -> FileRecord:
        try:
            unlocked = await self._unlock(principal, file, password)
        except DocVaultError as e:
            await self._record_failure(principal, AuditAction.FILE_UNLOCK, file, e)
            raise

        await self.audit.record(
            principal, AuditAction.FILE_UNLOCK, "file", file.id, AuditOutcome.SUCCESS,
            tenant_id=file.tenant_id,
            previously_locked_by=str(file.locked_by) if file.locked_by else None,
        )
        logger.info(f"File {file.id} unlocked by {principal.user_id}")
        return unlocked

    async def _unlock(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        password: Optional[str],
    ) -> FileRecord:
        if principal.is_suspended:
            raise ForbiddenError(DenialReason.SUSPENDED.message, reason=DenialReason.SUSPENDED.value)
        self.evaluator.scope_guard.require_in_scope(principal, file.tenant_id, "file", file.id)
        if not self.evaluator.is_visible(principal, file):
            raise ForbiddenError(DenialReason.NOT_VISIBLE.message, reason=DenialReason.NOT_VISIBLE.value)

        if not file.is_locked:
            raise NotLockedError(file.id)

        if not self.can_attempt_unlock(principal, file):
            required = file.lock_required_role or DEFAULT_UNLOCK_ROLE
            raise InsufficientRoleError(details={"required_role": required.value})

        if file.lock_password_hash is not None:
            verified = await asyncio.to_thread(self.hasher.verify, password or "", file.lock_password_hash)
            if not verified:
                raise WrongPasswordError()

        updated = await self.store.compare_and_set_lock(file.id, file.lock_version, LockState.unlocked())
        if updated is None:
            logger.info(f"Unlock race lost on file {file.id} by {principal.user_id}")
            raise NotLockedError(file.id)
        return updated

    async def _record_failure(
        self,
        principal: PrincipalContext,
        action: str,
        file: FileRecord,
        error: DocVaultError,
    ) -> None:
        outcome = AuditOutcome.FAILED if isinstance(error, LockStateError) else AuditOutcome.DENIED
        await self.audit.record(
            principal, action, "file", file.id, outcome,
            error_code=error.error_code,
        )
