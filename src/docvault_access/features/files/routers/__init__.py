"""File routers."""

from .lock_router import file_router, get_access_engine

__all__ = ["file_router", "get_access_engine"]
