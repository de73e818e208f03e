"""Tenants feature: principal context and tenant scope enforcement.

- entities/: SessionIdentity, PrincipalContext
- services/: TenantScopeGuard, PrincipalResolver
"""

from .entities import PrincipalContext, SessionIdentity
from .services import PrincipalResolver, TenantScopeGuard

__all__ = [
    "PrincipalContext",
    "SessionIdentity",
    "PrincipalResolver",
    "TenantScopeGuard",
]
