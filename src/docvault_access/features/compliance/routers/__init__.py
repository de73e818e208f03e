"""Compliance routers."""

from .compliance_router import compliance_router, get_settings_service

__all__ = ["compliance_router", "get_settings_service"]
