"""Tenant-scope services."""

from .tenant_scope_guard import TenantScopeGuard
from .principal_resolver import PrincipalResolver

__all__ = ["TenantScopeGuard", "PrincipalResolver"]
