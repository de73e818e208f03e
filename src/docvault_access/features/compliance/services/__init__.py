"""Compliance services."""

from .compliance_overlay import CompliancePolicyOverlay, validate_setting
from .tenant_settings_service import TenantSettingsService

__all__ = ["CompliancePolicyOverlay", "TenantSettingsService", "validate_setting"]
