"""Role permission cache backends."""

from .memory_cache import MemoryPermissionCache
from .redis_cache import RedisPermissionCache

__all__ = ["MemoryPermissionCache", "RedisPermissionCache"]
