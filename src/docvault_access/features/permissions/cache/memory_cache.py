"""In-process TTL cache for resolved role permissions."""

import fnmatch
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from ....config.constants import CacheKeys, CacheTTL, PermissionKey
from ....core.value_objects import TenantId
from ..entities import ResolvedPermission

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Cached permission map with its expiry time."""
    value: Dict[PermissionKey, ResolvedPermission]
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryPermissionCache:
    """Memory implementation of the RolePermissionCache protocol.

    One instance is created by the application and passed to the RoleCatalog;
    it is never a module-level singleton.

    Every invalidation bumps a generation counter. A ``set`` made with a
    generation read before the invalidation is dropped, so a reader that
    raced a role mutation cannot put the old permission map back.
    """

    def __init__(
        self,
        default_ttl: int = CacheTTL.PERMISSIONS_SHORT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, MemoryCacheEntry] = {}
        self._generation = 0
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _key(tenant_id: TenantId, role_name: str) -> str:
        return CacheKeys.ROLE_PERMISSIONS.format(tenant_id=tenant_id, role_name=role_name)

    async def generation(self) -> int:
        return self._generation

    async def get(self, tenant_id: TenantId, role_name: str) -> Optional[Dict[PermissionKey, ResolvedPermission]]:
        key = self._key(tenant_id, role_name)
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return None
        if entry.is_expired(self._clock()):
            del self._store[key]
            self.misses += 1
            return None
        self.hits += 1
        return dict(entry.value)

    async def set(
        self,
        tenant_id: TenantId,
        role_name: str,
        permissions: Mapping[PermissionKey, ResolvedPermission],
        ttl: Optional[int] = None,
        generation: Optional[int] = None,
    ) -> None:
        if generation is not None and generation != self._generation:
            logger.debug(f"Skipped caching stale permissions for role {role_name} in tenant {tenant_id}")
            return
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl > 0 else None
        self._store[self._key(tenant_id, role_name)] = MemoryCacheEntry(dict(permissions), expires_at)

    async def invalidate_role(self, tenant_id: TenantId, role_name: str) -> None:
        self._generation += 1
        self._store.pop(self._key(tenant_id, role_name), None)
        logger.debug(f"Invalidated cached permissions for role {role_name} in tenant {tenant_id}")

    async def invalidate_tenant(self, tenant_id: TenantId) -> None:
        self._generation += 1
        pattern = CacheKeys.ROLE_PERMISSIONS_TENANT_PATTERN.format(tenant_id=tenant_id)
        for key in [k for k in self._store if fnmatch.fnmatchcase(k, pattern)]:
            del self._store[key]
        logger.debug(f"Invalidated cached permissions for tenant {tenant_id}")

    async def clear(self) -> None:
        self._generation += 1
        self._store.clear()
        logger.debug("Cleared role permission cache")

    def __len__(self) -> int:
        return len(self._store)
