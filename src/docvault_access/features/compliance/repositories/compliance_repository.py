"""AsyncPG-based compliance settings repository."""

import json
import logging
from typing import Optional

import asyncpg

from ....config.constants import ComplianceMode, DatabaseTables
from ....core.exceptions import DatabaseError
from ....core.value_objects import TenantId
from ..entities import ComplianceSettings


logger = logging.getLogger(__name__)


class AsyncPGComplianceRepository:
    """AsyncPG implementation of ComplianceRepository protocol.

    Mode, locked fields and values live in one row, so ``save`` is a single
    atomic upsert. ``update_value`` rewrites one JSONB key and only while
    the row still has the mode the caller read.
    """

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    @property
    def _table(self) -> str:
        return f"{self.schema}.{DatabaseTables.TENANT_COMPLIANCE}"

    def _build_settings_from_row(self, row: asyncpg.Record) -> ComplianceSettings:
        values = row["settings"]
        if isinstance(values, str):
            values = json.loads(values)
        return ComplianceSettings(
            tenant_id=TenantId(row["tenant_id"]),
            mode=ComplianceMode.parse(row["mode"]),
            locked_fields=frozenset(row["locked_fields"] or ()),
            values=values or {},
        )

    async def get(self, tenant_id: TenantId) -> Optional[ComplianceSettings]:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT tenant_id, mode, locked_fields, settings FROM {self._table} WHERE tenant_id = $1",
                    tenant_id.value,
                )
            return self._build_settings_from_row(row) if row else None
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to load compliance settings for tenant {tenant_id}: {e}")
            raise DatabaseError(f"Failed to retrieve compliance settings: {e}")

    async def save(self, settings: ComplianceSettings) -> ComplianceSettings:
        query = f"""
            INSERT INTO {self._table} (tenant_id, mode, locked_fields, settings, updated_at)
            VALUES ($1, $2, $3, $4::jsonb, NOW())
            ON CONFLICT (tenant_id) DO UPDATE
            SET mode = EXCLUDED.mode,
                locked_fields = EXCLUDED.locked_fields,
                settings = EXCLUDED.settings,
                updated_at = NOW()
            RETURNING tenant_id, mode, locked_fields, settings
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    settings.tenant_id.value,
                    settings.mode.value,
                    sorted(settings.locked_fields),
                    json.dumps(dict(settings.values)),
                )
            return self._build_settings_from_row(row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to save compliance settings for tenant {settings.tenant_id}: {e}")
            raise DatabaseError(f"Failed to save compliance settings: {e}")

    async def update_value(self, settings: ComplianceSettings, name: str) -> Optional[ComplianceSettings]:
        query = f"""
            INSERT INTO {self._table} AS stored (tenant_id, mode, locked_fields, settings, updated_at)
            VALUES ($1, $2, $3, $4::jsonb, NOW())
            ON CONFLICT (tenant_id) DO UPDATE
            SET settings = jsonb_set(stored.settings, ARRAY[$5::text], $6::jsonb, true),
                updated_at = NOW()
            WHERE stored.mode = EXCLUDED.mode
            RETURNING tenant_id, mode, locked_fields, settings
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    settings.tenant_id.value,
                    settings.mode.value,
                    sorted(settings.locked_fields),
                    json.dumps(dict(settings.values)),
                    name,
                    json.dumps(settings.values[name]),
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update {name} for tenant {settings.tenant_id}: {e}")
            raise DatabaseError(f"Failed to update compliance setting: {e}")
        if row is None:
            logger.info(f"Compliance mode of tenant {settings.tenant_id} changed; {name} not written")
            return None
        return self._build_settings_from_row(row)
