"""In-memory ComplianceRepository."""

from typing import Dict, Optional

from ....core.value_objects import TenantId
from ..entities import ComplianceSettings


class InMemoryComplianceRepository:
    """Dictionary-backed ComplianceRepository; entities are immutable so save is atomic."""

    def __init__(self):
        self._settings: Dict[TenantId, ComplianceSettings] = {}

    async def get(self, tenant_id: TenantId) -> Optional[ComplianceSettings]:
        return self._settings.get(tenant_id)

    async def save(self, settings: ComplianceSettings) -> ComplianceSettings:
        self._settings[settings.tenant_id] = settings
        return settings

    async def update_value(self, settings: ComplianceSettings, name: str) -> Optional[ComplianceSettings]:
        stored = self._settings.get(settings.tenant_id)
        if stored is None:
            self._settings[settings.tenant_id] = settings
            return settings
        if stored.mode != settings.mode:
            return None
        updated = ComplianceSettings(
            tenant_id=stored.tenant_id,
            mode=stored.mode,
            locked_fields=stored.locked_fields,
            values={**stored.values, name: settings.values[name]},
        )
        self._settings[settings.tenant_id] = updated
        return updated
