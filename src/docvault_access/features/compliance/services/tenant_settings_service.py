"""Tenant settings service: the general update path and the mode-change path."""

import logging
from typing import Any

from ....config.constants import ComplianceMode, DEFAULT_TENANT_SETTINGS, PermissionKey
from ....core.exceptions import ConflictError, DocVaultError, ForbiddenError, ValidationError
from ....core.value_objects import TenantId
from ...audit.entities import AuditAction, AuditOutcome
from ...audit.services import AuditEmitter
from ...permissions.services import RoleCatalog
from ...tenants.entities import PrincipalContext
from ...tenants.services import TenantScopeGuard
from ..entities import ComplianceRepository, ComplianceSettings, SettingChange
from .compliance_overlay import CompliancePolicyOverlay

logger = logging.getLogger(__name__)


class TenantSettingsService:
    """Reads and writes compliance-governed tenant settings."""

    def __init__(
        self,
        repository: ComplianceRepository,
        overlay: CompliancePolicyOverlay,
        role_catalog: RoleCatalog,
        audit: AuditEmitter,
        default_mode: ComplianceMode = ComplianceMode.STANDARD,
    ):
        self.repository = repository
        self.overlay = overlay
        self.role_catalog = role_catalog
        self.audit = audit
        self.default_mode = default_mode

    async def load(self, tenant_id: TenantId) -> ComplianceSettings:
        """Stored settings, or the derived defaults for a tenant never configured."""
        settings = await self.repository.get(tenant_id)
        if settings is None:
            settings = self.overlay.derive_settings(tenant_id, self.default_mode, DEFAULT_TENANT_SETTINGS)
        return settings

    async def get_settings(self, principal: PrincipalContext, tenant_id: TenantId) -> ComplianceSettings:
        TenantScopeGuard.require_in_scope(principal, tenant_id, "tenant", tenant_id)
        await self.role_catalog.require_permission(principal, PermissionKey.SETTINGS_VIEW)
        return await self.load(tenant_id)

    async def update_setting(
        self,
        principal: PrincipalContext,
        tenant_id: TenantId,
        name: str,
        value: Any,
    ) -> ComplianceSettings:
        """General settings path. Locked fields are rejected for every role."""
        try:
            TenantScopeGuard.require_in_scope(principal, tenant_id, "tenant", tenant_id)
            await self.role_catalog.require_permission(principal, PermissionKey.SETTINGS_EDIT)
            current = await self.load(tenant_id)
            stored_value = self.overlay.enforce(current, SettingChange(name, value))
        except DocVaultError as e:
            await self.audit.record(
                principal, AuditAction.SETTING_UPDATE, "tenant_settings", tenant_id,
                AuditOutcome.DENIED, setting=name, error_code=e.error_code,
            )
            raise

        updated = ComplianceSettings(
            tenant_id=tenant_id,
            mode=current.mode,
            locked_fields=current.locked_fields,
            values={**current.values, name: stored_value},
        )
        # Guarded on current.mode; mode and locked fields are left to change_compliance_mode.
        saved = await self.repository.update_value(updated, name)
        if saved is None:
            error = ConflictError(
                "Compliance mode changed while the setting was being updated",
                details={"setting": name, "expected_mode": current.mode.value},
            )
            await self.audit.record(
                principal, AuditAction.SETTING_UPDATE, "tenant_settings", tenant_id,
                AuditOutcome.FAILED, setting=name, error_code=error.error_code,
            )
            raise error
        logger.info(f"Setting {name} updated for tenant {tenant_id} by {principal.user_id}")
        await self.audit.record(
            principal, AuditAction.SETTING_UPDATE, "tenant_settings", tenant_id,
            AuditOutcome.SUCCESS, tenant_id=tenant_id, setting=name,
            previous=current.get(name), value=stored_value,
        )
        return saved

    async def change_compliance_mode(
        self,
        principal: PrincipalContext,
        tenant_id: TenantId,
        mode: Any,
    ) -> ComplianceSettings:
        """SuperAdmin-only mode migration, re-deriving locked fields in the same write."""
        try:
            if not principal.is_super_admin or principal.is_suspended:
                raise ForbiddenError(
                    "Only a SuperAdmin may change the compliance mode",
                    reason="insufficient_role",
                )
            TenantScopeGuard.require_in_scope(principal, tenant_id, "tenant", tenant_id)
            new_mode = self._parse_mode(mode)
        except DocVaultError as e:
            await self.audit.record(
                principal, AuditAction.COMPLIANCE_MODE_CHANGE, "tenant_settings", tenant_id,
                AuditOutcome.DENIED, error_code=e.error_code, requested_mode=str(mode),
            )
            raise

        current = await self.load(tenant_id)
        derived = self.overlay.derive_settings(tenant_id, new_mode, current.values)
        saved = await self.repository.save(derived)

        logger.warning(
            f"Compliance mode of tenant {tenant_id} changed {current.mode.value} -> "
            f"{new_mode.value} by {principal.user_id}"
        )
        await self.audit.record(
            principal, AuditAction.COMPLIANCE_MODE_CHANGE, "tenant_settings", tenant_id,
            AuditOutcome.SUCCESS, tenant_id=tenant_id,
            previous_mode=current.mode.value, mode=new_mode.value,
            locked_fields=sorted(saved.locked_fields),
        )
        return saved

    @staticmethod
    def _parse_mode(mode: Any) -> ComplianceMode:
        if isinstance(mode, ComplianceMode):
            return mode
        try:
            return ComplianceMode.parse(str(mode))
        except ValueError as e:
            raise ValidationError(str(e), field="mode")
