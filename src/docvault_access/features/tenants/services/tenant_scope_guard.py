"""Tenant scope guard.

The single choke point preventing cross-tenant leakage. It is a pure
predicate with no state and no caching: allow-lists may change between
requests, so the guard runs on every request path touching tenant data.
"""

import logging
from typing import Any, Optional

from ....core.exceptions import NotFoundError
from ....core.value_objects import TenantId
from ..entities import PrincipalContext

logger = logging.getLogger(__name__)


class TenantScopeGuard:
    """Decides whether a principal may see data owned by a tenant."""

    @staticmethod
    def in_scope(principal: PrincipalContext, target_tenant_id: Optional[TenantId]) -> bool:
        if principal.is_super_admin:
            return True
        if target_tenant_id is None:
            return False
        return (
            target_tenant_id == principal.tenant_id
            or target_tenant_id in principal.allowed_tenant_ids
        )

    @classmethod
    def require_in_scope(
        cls,
        principal: PrincipalContext,
        target_tenant_id: Optional[TenantId],
        resource_type: str = "resource",
        resource_id: Any = None,
    ) -> None:
        """Raise NotFoundError, shaped exactly like absence, when out of scope."""
        if not cls.in_scope(principal, target_tenant_id):
            logger.info(
                f"Scope denial: user {principal.user_id} (tenant {principal.tenant_id}) "
                f"-> {resource_type} {resource_id} in tenant {target_tenant_id}"
            )
            raise NotFoundError(resource_type, resource_id)
