"""Persistence contract for tenant compliance settings."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from ....core.value_objects import TenantId
from .compliance_settings import ComplianceSettings


@runtime_checkable
class ComplianceRepository(Protocol):

    @abstractmethod
    async def get(self, tenant_id: TenantId) -> Optional[ComplianceSettings]:
        """Get a tenant's compliance settings, None if never stored."""
        ...

    @abstractmethod
    async def save(self, settings: ComplianceSettings) -> ComplianceSettings:
        """Replace mode, locked fields and values in one atomic write."""
        ...

    @abstractmethod
    async def update_value(self, settings: ComplianceSettings, name: str) -> Optional[ComplianceSettings]:
        """Write ``settings.values[name]`` alone, if the stored mode is still ``settings.mode``.

        A tenant with no row gets ``settings`` inserted whole. Mode and locked
        fields of an existing row are never written. Returns None when the
        stored mode differs.
        """
        ...
