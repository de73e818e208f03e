"""Redis-backed cache for resolved role permissions."""

import json
import logging
from typing import Dict, Mapping, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from ....config.constants import CacheKeys, CacheTTL, PermissionKey
from ....core.exceptions import CacheError
from ....core.value_objects import TenantId
from ..entities import ResolvedPermission

logger = logging.getLogger(__name__)


class RedisPermissionCache:
    """Redis implementation of the RolePermissionCache protocol.

    Values are stored as JSON lists of resolved permissions. Pattern
    invalidation uses SCAN so it never blocks the server.

    Invalidations INCR a generation key before deleting. A ``set`` carrying
    a generation WATCHes that key and writes in MULTI/EXEC only while it is
    unchanged.
    """

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "",
        default_ttl: int = CacheTTL.PERMISSIONS_SHORT,
    ):
        self.client = client
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisPermissionCache":
        return cls(redis.from_url(url, decode_responses=True), **kwargs)

    def _key(self, tenant_id: TenantId, role_name: str) -> str:
        return self.key_prefix + CacheKeys.ROLE_PERMISSIONS.format(tenant_id=tenant_id, role_name=role_name)

    @property
    def _generation_key(self) -> str:
        return self.key_prefix + CacheKeys.ROLE_PERMISSIONS_GENERATION

    async def generation(self) -> int:
        try:
            raw = await self.client.get(self._generation_key)
        except RedisError as e:
            raise CacheError(f"Failed to read permission cache generation: {e}")
        return int(raw or 0)

    async def _bump_generation(self) -> None:
        try:
            await self.client.incr(self._generation_key)
        except RedisError as e:
            raise CacheError(f"Failed to invalidate permission cache: {e}")

    async def get(self, tenant_id: TenantId, role_name: str) -> Optional[Dict[PermissionKey, ResolvedPermission]]:
        try:
            raw = await self.client.get(self._key(tenant_id, role_name))
        except RedisError as e:
            logger.error(f"Failed to read cached permissions for {role_name}: {e}")
            raise CacheError(f"Failed to read permission cache: {e}")

        if raw is None:
            return None

        try:
            items = json.loads(raw)
            resolved = [ResolvedPermission.from_dict(item) for item in items]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding corrupt permission cache entry for {role_name}: {e}")
            await self.invalidate_role(tenant_id, role_name)
            return None

        return {r.permission: r for r in resolved}

    async def set(
        self,
        tenant_id: TenantId,
        role_name: str,
        permissions: Mapping[PermissionKey, ResolvedPermission],
        ttl: Optional[int] = None,
        generation: Optional[int] = None,
    ) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        expiry = ttl if ttl > 0 else None
        key = self._key(tenant_id, role_name)
        payload = json.dumps([p.to_dict() for p in permissions.values()])
        try:
            if generation is None:
                await self.client.set(key, payload, ex=expiry)
                return
            async with self.client.pipeline(transaction=True) as pipe:
                await pipe.watch(self._generation_key)
                current = await pipe.get(self._generation_key)
                if int(current or 0) != generation:
                    logger.debug(f"Skipped caching stale permissions for {role_name}")
                    return
                pipe.multi()
                pipe.set(key, payload, ex=expiry)
                await pipe.execute()
        except WatchError:
            logger.debug(f"Skipped caching permissions for {role_name}: invalidated during write")
        except RedisError as e:
            logger.error(f"Failed to cache permissions for {role_name}: {e}")
            raise CacheError(f"Failed to write permission cache: {e}")

    async def invalidate_role(self, tenant_id: TenantId, role_name: str) -> None:
        await self._bump_generation()
        try:
            await self.client.delete(self._key(tenant_id, role_name))
        except RedisError as e:
            raise CacheError(f"Failed to invalidate permission cache: {e}")

    async def _delete_pattern(self, pattern: str) -> int:
        deleted = 0
        try:
            async for key in self.client.scan_iter(match=self.key_prefix + pattern):
                deleted += await self.client.delete(key)
        except RedisError as e:
            raise CacheError(f"Failed to invalidate permission cache: {e}")
        return deleted

    async def invalidate_tenant(self, tenant_id: TenantId) -> None:
        await self._bump_generation()
        deleted = await self._delete_pattern(
            CacheKeys.ROLE_PERMISSIONS_TENANT_PATTERN.format(tenant_id=tenant_id)
        )
        logger.debug(f"Invalidated {deleted} cached permission entries for tenant {tenant_id}")

    async def clear(self) -> None:
        await self._bump_generation()
        deleted = await self._delete_pattern(CacheKeys.ROLE_PERMISSIONS_PATTERN)
        logger.debug(f"Cleared {deleted} cached permission entries")

    async def close(self) -> None:
        await self.client.aclose()
