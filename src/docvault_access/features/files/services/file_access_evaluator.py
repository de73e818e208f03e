"""File access evaluator.

Pure decision function: given a principal, a file record and an operation it
returns an AccessDecision. No clock, no I/O, no randomness, so it may be
called any number of times per request with identical results.
"""

from ....config.constants import BaseRole, Visibility
from ...tenants.entities import PrincipalContext
from ...tenants.services import TenantScopeGuard
from ..entities import AccessDecision, DenialReason, FileOperation, FileRecord


class FileAccessEvaluator:
    """Visibility, ownership, role and lock checks for one file operation."""

    def __init__(self, scope_guard: TenantScopeGuard = None):
        self.scope_guard = scope_guard or TenantScopeGuard()

    def can(self, principal: PrincipalContext, file: FileRecord, operation: FileOperation) -> bool:
        return self.evaluate(principal, file, operation).allowed

    def evaluate(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        operation: FileOperation,
    ) -> AccessDecision:
        operation = FileOperation(operation)

        if principal.is_suspended:
            return AccessDecision.deny(DenialReason.SUSPENDED)

        if not self.scope_guard.in_scope(principal, file.tenant_id):
            return AccessDecision.deny(DenialReason.OUT_OF_SCOPE)

        if not self.is_visible(principal, file):
            return AccessDecision.deny(DenialReason.NOT_VISIBLE)

        return self._refine(principal, file, operation)

    @staticmethod
    def is_visible(principal: PrincipalContext, file: FileRecord) -> bool:
        """Visibility gate, assuming the file is already in scope."""
        if file.is_owned_by(principal.user_id) or principal.at_least(BaseRole.ADMIN):
            return True
        if file.visibility == Visibility.PRIVATE:
            return False
        return (
            file.department_id is None
            or file.is_company_folder
            or principal.in_department(file.department_id)
        )

    def _refine(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        operation: FileOperation,
    ) -> AccessDecision:
        is_owner = file.is_owned_by(principal.user_id)

        if operation in (FileOperation.VIEW, FileOperation.DOWNLOAD):
            if file.is_locked and not (
                is_owner
                or file.locked_by == principal.user_id
                or principal.at_least(BaseRole.MANAGER)
            ):
                return AccessDecision.deny(DenialReason.FILE_LOCKED)
            return AccessDecision.allow()

        if operation == FileOperation.DELETE:
            if not (is_owner or principal.at_least(BaseRole.ADMIN)):
                return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)
            if file.is_locked:
                return AccessDecision.deny(DenialReason.FILE_LOCKED)
            return AccessDecision.allow()

        if operation == FileOperation.SHARE:
            if not (is_owner or principal.at_least(BaseRole.MANAGER)):
                return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)
            return AccessDecision.allow()

        if operation in (FileOperation.LOCK, FileOperation.UNLOCK):
            if not principal.at_least(BaseRole.MANAGER):
                return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)
            return AccessDecision.allow()

        if operation == FileOperation.UPLOAD_INTO and not file.is_directory:
            return AccessDecision.deny(DenialReason.NOT_A_FOLDER)

        # rename, upload_into
        if file.is_locked:
            return AccessDecision.deny(DenialReason.FILE_LOCKED)
        return AccessDecision.allow()
