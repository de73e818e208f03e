"""Tests for the compliance settings repositories."""

import json

import asyncpg
import pytest

from docvault_access.config.constants import ComplianceMode, SettingName
from docvault_access.core.exceptions import DatabaseError
from docvault_access.core.value_objects import TenantId
from docvault_access.features.compliance.entities import ComplianceSettings
from docvault_access.features.compliance.repositories import (
    AsyncPGComplianceRepository,
    InMemoryComplianceRepository,
)
from docvault_access.features.compliance.services import CompliancePolicyOverlay


def _standard(tenant_id, **values):
    return ComplianceSettings(tenant_id=tenant_id, values=values)


class TestInMemoryComplianceRepository:

    @pytest.fixture
    def repository(self):
        return InMemoryComplianceRepository()

    @pytest.mark.asyncio
    async def test_first_update_inserts_row(self, repository):
        tenant = TenantId.generate()
        saved = await repository.update_value(_standard(tenant, mfa_required=True), SettingName.MFA_REQUIRED)
        assert saved.get(SettingName.MFA_REQUIRED) is True
        assert await repository.get(tenant) == saved

    @pytest.mark.asyncio
    async def test_update_writes_only_the_named_value(self, repository):
        tenant = TenantId.generate()
        await repository.save(_standard(tenant, session_timeout_minutes=45))

        stale = _standard(tenant, session_timeout_minutes=60, file_versioning_enabled=True)
        saved = await repository.update_value(stale, SettingName.FILE_VERSIONING_ENABLED)

        assert saved.get(SettingName.FILE_VERSIONING_ENABLED) is True
        assert saved.get(SettingName.SESSION_TIMEOUT_MINUTES) == 45

    @pytest.mark.asyncio
    async def test_update_refused_after_mode_change(self, repository):
        tenant = TenantId.generate()
        hipaa = CompliancePolicyOverlay().derive_settings(tenant, ComplianceMode.HIPAA, {})
        await repository.save(hipaa)

        result = await repository.update_value(_standard(tenant, mfa_required=False), SettingName.MFA_REQUIRED)

        assert result is None
        assert await repository.get(tenant) == hipaa


class TestAsyncPGComplianceRepository:

    @pytest.fixture
    def conn(self, mocker):
        return mocker.AsyncMock()

    @pytest.fixture
    def pool(self, mocker, conn):
        pool = mocker.MagicMock()
        pool.acquire.return_value.__aenter__.return_value = conn
        return pool

    @staticmethod
    def _row(tenant_id, mode="Standard", locked=(), **values):
        return {
            "tenant_id": tenant_id.value,
            "mode": mode,
            "locked_fields": list(locked),
            "settings": json.dumps(values),
        }

    @pytest.mark.asyncio
    async def test_update_value_is_guarded_by_mode(self, pool, conn):
        tenant = TenantId.generate()
        conn.fetchrow.return_value = self._row(tenant, session_timeout_minutes=30)

        saved = await AsyncPGComplianceRepository(pool).update_value(
            _standard(tenant, session_timeout_minutes=30), SettingName.SESSION_TIMEOUT_MINUTES
        )

        query, *params = conn.fetchrow.call_args.args
        assert "WHERE stored.mode = EXCLUDED.mode" in query
        assert "jsonb_set" in query
        assert "mode = EXCLUDED.mode," not in query
        assert "locked_fields = EXCLUDED" not in query
        assert params[1] == "Standard"
        assert params[4:] == [SettingName.SESSION_TIMEOUT_MINUTES, "30"]
        assert saved.get(SettingName.SESSION_TIMEOUT_MINUTES) == 30

    @pytest.mark.asyncio
    async def test_update_value_returns_none_when_mode_moved(self, pool, conn):
        conn.fetchrow.return_value = None
        tenant = TenantId.generate()
        result = await AsyncPGComplianceRepository(pool).update_value(
            _standard(tenant, mfa_required=False), SettingName.MFA_REQUIRED
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_save_writes_mode_and_locks(self, pool, conn):
        tenant = TenantId.generate()
        conn.fetchrow.return_value = self._row(tenant, "HIPAA", [SettingName.MFA_REQUIRED], mfa_required=True)
        hipaa = CompliancePolicyOverlay().derive_settings(tenant, ComplianceMode.HIPAA, {})

        saved = await AsyncPGComplianceRepository(pool).save(hipaa)

        params = conn.fetchrow.call_args.args[1:]
        assert params[1] == "HIPAA"
        assert SettingName.MFA_REQUIRED in params[2]
        assert saved.mode == ComplianceMode.HIPAA

    @pytest.mark.asyncio
    async def test_database_errors_are_wrapped(self, pool, conn):
        conn.fetchrow.side_effect = asyncpg.PostgresError("connection reset")
        with pytest.raises(DatabaseError):
            await AsyncPGComplianceRepository(pool).update_value(
                _standard(TenantId.generate()), SettingName.MFA_REQUIRED
            )
