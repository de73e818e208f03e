"""Wires the engine's components together.

One container per application. The permission cache is created here and
handed to the RoleCatalog explicitly; nothing in the engine keeps
module-level state.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import asyncpg

from ..config.settings import AccessSettings
from ..features.access.services import AccessEngine
from ..features.audit.entities import AuditSink
from ..features.audit.services import AuditEmitter, InMemoryAuditSink, LoggingAuditSink
from ..features.compliance.repositories import AsyncPGComplianceRepository, InMemoryComplianceRepository
from ..features.compliance.services import CompliancePolicyOverlay, TenantSettingsService
from ..features.files.repositories import AsyncPGFileLockStore, InMemoryFileLockStore
from ..features.files.services import FileAccessEvaluator, LockManager, LockPasswordHasher
from ..features.permissions.cache import MemoryPermissionCache, RedisPermissionCache
from ..features.permissions.repositories import AsyncPGRoleRepository, InMemoryRoleRepository
from ..features.permissions.services import RoleCatalog
from ..features.tenants.services import PrincipalResolver, TenantScopeGuard

logger = logging.getLogger(__name__)


@dataclass
class AccessContainer:
    """All engine components for one application."""

    settings: AccessSettings
    role_repository: object
    file_store: object
    compliance_repository: object
    permission_cache: object
    audit_sink: AuditSink
    role_catalog: RoleCatalog
    principal_resolver: PrincipalResolver
    evaluator: FileAccessEvaluator
    lock_manager: LockManager
    settings_service: TenantSettingsService
    engine: AccessEngine
    pool: Optional[asyncpg.Pool] = None

    @classmethod
    def assemble(
        cls,
        settings: AccessSettings,
        role_repository,
        file_store,
        compliance_repository,
        permission_cache,
        audit_sink: AuditSink,
        pool: Optional[asyncpg.Pool] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "AccessContainer":
        audit = AuditEmitter(audit_sink, clock) if clock else AuditEmitter(audit_sink)
        role_catalog = RoleCatalog(role_repository, permission_cache, audit=audit)
        evaluator = FileAccessEvaluator(TenantScopeGuard())
        hasher = LockPasswordHasher(
            rounds=settings.lock_password_bcrypt_rounds,
            min_length=settings.lock_password_min_length,
        )
        lock_kwargs = {"clock": clock} if clock else {}
        lock_manager = LockManager(file_store, evaluator, hasher, audit, **lock_kwargs)
        settings_service = TenantSettingsService(
            compliance_repository,
            CompliancePolicyOverlay(),
            role_catalog,
            audit,
            default_mode=settings.compliance_mode,
        )
        engine = AccessEngine(role_catalog, evaluator, lock_manager, settings_service, audit)
        return cls(
            settings=settings,
            role_repository=role_repository,
            file_store=file_store,
            compliance_repository=compliance_repository,
            permission_cache=permission_cache,
            audit_sink=audit_sink,
            role_catalog=role_catalog,
            principal_resolver=PrincipalResolver(role_catalog),
            evaluator=evaluator,
            lock_manager=lock_manager,
            settings_service=settings_service,
            engine=engine,
            pool=pool,
        )

    @classmethod
    def in_memory(
        cls,
        settings: Optional[AccessSettings] = None,
        audit_sink: Optional[AuditSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "AccessContainer":
        """Container backed entirely by in-memory stores."""
        settings = settings or AccessSettings()
        return cls.assemble(
            settings,
            InMemoryRoleRepository(),
            InMemoryFileLockStore(),
            InMemoryComplianceRepository(),
            MemoryPermissionCache(default_ttl=settings.permission_cache_ttl),
            audit_sink or InMemoryAuditSink(),
            clock=clock,
        )

    @classmethod
    async def from_settings(cls, settings: AccessSettings) -> "AccessContainer":
        """Container for a deployment: asyncpg when a database is configured."""
        settings.validate_startup()

        if settings.permission_cache_backend == "redis":
            cache = RedisPermissionCache.from_url(
                str(settings.redis_url),
                key_prefix=settings.get_cache_key_prefix(),
                default_ttl=settings.permission_cache_ttl,
            )
        else:
            cache = MemoryPermissionCache(default_ttl=settings.permission_cache_ttl)

        sink = InMemoryAuditSink() if settings.audit_sink == "memory" else LoggingAuditSink()

        if settings.database_url is None:
            logger.warning("No database configured; using in-memory stores")
            return cls.assemble(
                settings,
                InMemoryRoleRepository(),
                InMemoryFileLockStore(),
                InMemoryComplianceRepository(),
                cache,
                sink,
            )

        pool = await asyncpg.create_pool(
            str(settings.database_url),
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
        logger.info("Database pool created")
        return cls.assemble(
            settings,
            AsyncPGRoleRepository(pool),
            AsyncPGFileLockStore(pool),
            AsyncPGComplianceRepository(pool),
            cache,
            sink,
            pool=pool,
        )

    async def close(self) -> None:
        if isinstance(self.permission_cache, RedisPermissionCache):
            await self.permission_cache.close()
        if self.pool is not None:
            await self.pool.close()
