"""Role routers."""

from .role_router import get_role_catalog, role_router

__all__ = ["get_role_catalog", "role_router"]
