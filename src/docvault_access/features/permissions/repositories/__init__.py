"""Role repository implementations."""

from .role_repository import AsyncPGRoleRepository
from .memory_repository import InMemoryRoleRepository

__all__ = ["AsyncPGRoleRepository", "InMemoryRoleRepository"]
