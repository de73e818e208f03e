"""Compliance request and response models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..entities import ComplianceRestrictions, ComplianceSettings


class SettingUpdateRequest(BaseModel):
    """Request model for changing one tenant setting."""

    value: Any = Field(..., description="New setting value")


class ComplianceModeRequest(BaseModel):
    """Request model for migrating the tenant's compliance mode."""

    mode: str = Field(..., description="Standard, HIPAA, SOX or GDPR")


class ComplianceSettingsResponse(BaseModel):
    tenant_id: str
    mode: str
    mode_label: str
    locked_fields: List[str]
    values: Dict[str, Any]

    @classmethod
    def from_settings(cls, settings: ComplianceSettings) -> "ComplianceSettingsResponse":
        return cls(**settings.to_dict())


class EnforcedSettingResponse(BaseModel):
    name: str
    description: str
    forced_value: Any


class ComplianceRestrictionsResponse(BaseModel):
    mode: str
    mode_label: str
    is_active: bool
    min_retention_days: Optional[int] = None
    enforced_settings: List[EnforcedSettingResponse]

    @classmethod
    def from_restrictions(cls, restrictions: ComplianceRestrictions) -> "ComplianceRestrictionsResponse":
        return cls(**restrictions.to_dict())


__all__ = [
    "SettingUpdateRequest",
    "ComplianceModeRequest",
    "ComplianceSettingsResponse",
    "EnforcedSettingResponse",
    "ComplianceRestrictionsResponse",
]
