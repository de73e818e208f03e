"""Access engine facade.

Single entry point for authorization decisions. Every check runs the stages
in the same order: suspended principal, tenant scope, role permission, file
evaluator, compliance overlay. The first failing stage decides the reason.
"""

import logging
from typing import Any, Dict, Optional, Union

from ....config.constants import PermissionKey, SettingName
from ....core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ....core.value_objects import FileId
from ...audit.entities import AuditAction, AuditOutcome
from ...audit.services import AuditEmitter
from ...compliance.entities import ComplianceAction, ComplianceSettings
from ...compliance.services import TenantSettingsService
from ...files.entities import AccessDecision, DenialReason, FileOperation, FileRecord
from ...files.services import FileAccessEvaluator, LockManager
from ...permissions.entities import Role
from ...permissions.services import RoleCatalog
from ...tenants.entities import PrincipalContext
from ...tenants.services import TenantScopeGuard

logger = logging.getLogger(__name__)

Resource = Union[FileRecord, Role, ComplianceSettings]

# Permission each file operation needs from the role catalog. Unlock is
# gated by lock eligibility instead.
FILE_OPERATION_PERMISSIONS: Dict[FileOperation, Optional[PermissionKey]] = {
    FileOperation.VIEW: PermissionKey.FILES_VIEW,
    FileOperation.DOWNLOAD: PermissionKey.FILES_DOWNLOAD,
    FileOperation.UPLOAD_INTO: PermissionKey.FILES_UPLOAD,
    FileOperation.RENAME: PermissionKey.FILES_UPLOAD,
    FileOperation.DELETE: PermissionKey.FILES_DELETE,
    FileOperation.SHARE: PermissionKey.FILES_SHARE,
    FileOperation.LOCK: PermissionKey.FILES_LOCK,
    FileOperation.UNLOCK: None,
}

ROLE_OPERATION_PERMISSIONS: Dict[str, PermissionKey] = {
    "view": PermissionKey.ROLES_VIEW,
    "manage": PermissionKey.ROLES_MANAGE,
}

SETTINGS_OPERATION_PERMISSIONS: Dict[str, PermissionKey] = {
    "view": PermissionKey.SETTINGS_VIEW,
    "edit": PermissionKey.SETTINGS_EDIT,
}


def _resource_type(resource: Resource) -> str:
    if isinstance(resource, FileRecord):
        return "folder" if resource.is_directory else "file"
    if isinstance(resource, Role):
        return "role"
    if isinstance(resource, ComplianceSettings):
        return "tenant_settings"
    raise ValidationError(f"Unsupported resource type: {type(resource).__name__}", field="resource")


def _resource_id(resource: Resource) -> Any:
    if isinstance(resource, ComplianceSettings):
        return resource.tenant_id
    return resource.id


class AccessEngine:
    """check / authorize / lock / unlock for an authenticated principal."""

    def __init__(
        self,
        role_catalog: RoleCatalog,
        evaluator: FileAccessEvaluator,
        lock_manager: LockManager,
        settings_service: TenantSettingsService,
        audit: AuditEmitter,
    ):
        self.role_catalog = role_catalog
        self.evaluator = evaluator
        self.lock_manager = lock_manager
        self.settings_service = settings_service
        self.audit = audit
        self.scope_guard = evaluator.scope_guard

    async def check(
        self,
        principal: PrincipalContext,
        resource: Resource,
        operation: Any,
        public: bool = False,
    ) -> AccessDecision:
        """Allow, or Deny with the reason of the first failing stage."""
        resource_type = _resource_type(resource)
        decision, privileged = await self._decide(principal, resource, operation, public)

        if not decision.allowed and privileged:
            await self.audit.record(
                principal, AuditAction.ACCESS_DENIED, resource_type, _resource_id(resource),
                AuditOutcome.DENIED, operation=str(getattr(operation, "value", operation)),
                reason=decision.reason.value,
            )
        return decision

    async def authorize(
        self,
        principal: PrincipalContext,
        resource: Resource,
        operation: Any,
        public: bool = False,
    ) -> None:
        """Raise the error matching a denial; out-of-scope looks like absence."""
        decision = await self.check(principal, resource, operation, public)
        if decision.allowed:
            return
        if decision.reason == DenialReason.OUT_OF_SCOPE:
            raise NotFoundError(_resource_type(resource), _resource_id(resource))
        raise ForbiddenError(decision.reason.message, reason=decision.reason.value)

    async def _decide(self, principal, resource, operation, public):
        if isinstance(resource, FileRecord):
            op = self._parse(FileOperation, operation)
            return await self._check_file(principal, resource, op, public), op.is_privileged
        if isinstance(resource, Role):
            op = self._parse_name(ROLE_OPERATION_PERMISSIONS, operation)
            return await self._check_role(principal, resource, op), op != "view"
        op = self._parse_name(SETTINGS_OPERATION_PERMISSIONS, operation)
        return await self._check_settings(principal, resource, op), op != "view"

    @staticmethod
    def _parse(enum_cls, operation):
        try:
            return enum_cls(operation)
        except ValueError:
            raise ValidationError(f"Unknown operation: {operation}", field="operation")

    @staticmethod
    def _parse_name(table: Dict[str, PermissionKey], operation: Any) -> str:
        name = str(getattr(operation, "value", operation))
        if name not in table:
            raise ValidationError(f"Unknown operation: {operation}", field="operation")
        return name

    async def _check_permission(self, principal: PrincipalContext, permission: Optional[PermissionKey]) -> bool:
        return permission is None or await self.role_catalog.has_permission(principal, permission)

    async def _check_file(
        self,
        principal: PrincipalContext,
        file: FileRecord,
        operation: FileOperation,
        public: bool,
    ) -> AccessDecision:
        if principal.is_suspended:
            return AccessDecision.deny(DenialReason.SUSPENDED)
        if not self.scope_guard.in_scope(principal, file.tenant_id):
            return AccessDecision.deny(DenialReason.OUT_OF_SCOPE)
        if not await self._check_permission(principal, FILE_OPERATION_PERMISSIONS[operation]):
            return AccessDecision.deny(DenialReason.MISSING_PERMISSION)

        decision = self.evaluator.evaluate(principal, file, operation)
        if not decision.allowed:
            return decision

        if operation == FileOperation.SHARE and public:
            return await self._check_public_share(file)
        return decision

    async def _check_public_share(self, file: FileRecord) -> AccessDecision:
        settings = await self.settings_service.load(file.tenant_id)
        blocked = self.settings_service.overlay.check_action(settings.mode, ComplianceAction.PUBLIC_SHARE)
        if blocked or not settings.get(SettingName.PUBLIC_SHARING_ENABLED):
            return AccessDecision.deny(DenialReason.COMPLIANCE_RESTRICTED)
        return AccessDecision.allow()

    async def _check_role(self, principal: PrincipalContext, role: Role, operation: str) -> AccessDecision:
        if principal.is_suspended:
            return AccessDecision.deny(DenialReason.SUSPENDED)
        if role.tenant_id is not None and role.tenant_id != principal.tenant_id and not principal.is_super_admin:
            return AccessDecision.deny(DenialReason.OUT_OF_SCOPE)
        if not await self._check_permission(principal, ROLE_OPERATION_PERMISSIONS[operation]):
            return AccessDecision.deny(DenialReason.MISSING_PERMISSION)

        if operation == "manage":
            if role.is_system:
                return AccessDecision.deny(DenialReason.IMMUTABLE)
            if (role.is_global and not principal.is_super_admin) or role.base_role > principal.base_role:
                return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)
        return AccessDecision.allow()

    async def _check_settings(
        self,
        principal: PrincipalContext,
        settings: ComplianceSettings,
        operation: str,
    ) -> AccessDecision:
        if principal.is_suspended:
            return AccessDecision.deny(DenialReason.SUSPENDED)
        if not self.scope_guard.in_scope(principal, settings.tenant_id):
            return AccessDecision.deny(DenialReason.OUT_OF_SCOPE)
        if not await self._check_permission(principal, SETTINGS_OPERATION_PERMISSIONS[operation]):
            return AccessDecision.deny(DenialReason.MISSING_PERMISSION)
        return AccessDecision.allow()

    # Lock delegation

    async def get_file(self, principal: PrincipalContext, file_id: FileId) -> FileRecord:
        return await self.lock_manager.load(principal, file_id)

    async def lock(
        self,
        principal: PrincipalContext,
        file_id: FileId,
        password: Optional[str] = None,
        required_role: Any = None,
    ) -> FileRecord:
        file = await self.get_file(principal, file_id)
        if not await self.role_catalog.has_permission(principal, PermissionKey.FILES_LOCK):
            await self.audit.record(
                principal, AuditAction.FILE_LOCK, "file", file.id, AuditOutcome.DENIED,
                reason=DenialReason.MISSING_PERMISSION.value,
            )
            raise ForbiddenError(
                DenialReason.MISSING_PERMISSION.message,
                reason=DenialReason.MISSING_PERMISSION.value,
            )
        return await self.lock_manager.lock(principal, file, password, required_role)

    async def unlock(
        self,
        principal: PrincipalContext,
        file_id: FileId,
        password: Optional[str] = None,
    ) -> FileRecord:
        file = await self.get_file(principal, file_id)
        return await self.lock_manager.unlock(principal, file, password)
