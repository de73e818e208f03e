"""Compliance settings router.

All endpoints act on the caller's home tenant; the tenant is never taken from
client input.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ...tenants.entities import PrincipalContext
from ...tenants.routers import get_current_principal
from ..models import (
    ComplianceModeRequest,
    ComplianceRestrictionsResponse,
    ComplianceSettingsResponse,
    SettingUpdateRequest,
)
from ..services import TenantSettingsService


compliance_router = APIRouter(
    prefix="/compliance",
    tags=["Compliance"],
    responses={403: {"description": "Setting locked or operation not permitted"}},
)


def get_settings_service() -> TenantSettingsService:
    """Placeholder for tenant settings service dependency.

    Applications must override this via:
    app.dependency_overrides[get_settings_service] = lambda: service
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Settings service not configured. Application must provide TenantSettingsService implementation.",
    )


@compliance_router.get("", response_model=ComplianceSettingsResponse)
async def get_compliance_settings(
    principal: PrincipalContext = Depends(get_current_principal),
    service: TenantSettingsService = Depends(get_settings_service),
) -> ComplianceSettingsResponse:
    """Current compliance mode, locked fields and setting values."""
    settings = await service.get_settings(principal, principal.tenant_id)
    return ComplianceSettingsResponse.from_settings(settings)


@compliance_router.get("/restrictions", response_model=ComplianceRestrictionsResponse)
async def get_compliance_restrictions(
    principal: PrincipalContext = Depends(get_current_principal),
    service: TenantSettingsService = Depends(get_settings_service),
) -> ComplianceRestrictionsResponse:
    """What the tenant's compliance mode enforces."""
    settings = await service.get_settings(principal, principal.tenant_id)
    return ComplianceRestrictionsResponse.from_restrictions(service.overlay.restrictions(settings.mode))


@compliance_router.put("/settings/{name}", response_model=ComplianceSettingsResponse)
async def update_setting(
    request: SettingUpdateRequest,
    name: str = Path(..., description="Setting name"),
    principal: PrincipalContext = Depends(get_current_principal),
    service: TenantSettingsService = Depends(get_settings_service),
) -> ComplianceSettingsResponse:
    """Change one setting through the general settings path."""
    settings = await service.update_setting(principal, principal.tenant_id, name, request.value)
    return ComplianceSettingsResponse.from_settings(settings)


@compliance_router.put("/mode", response_model=ComplianceSettingsResponse)
async def change_compliance_mode(
    request: ComplianceModeRequest,
    principal: PrincipalContext = Depends(get_current_principal),
    service: TenantSettingsService = Depends(get_settings_service),
) -> ComplianceSettingsResponse:
    """Migrate the compliance mode (SuperAdmin only)."""
    settings = await service.change_compliance_mode(principal, principal.tenant_id, request.mode)
    return ComplianceSettingsResponse.from_settings(settings)
