"""Builds a PrincipalContext from a verified session identity."""

import logging
from typing import TYPE_CHECKING

from ....config.constants import BaseRole
from ..entities import PrincipalContext, SessionIdentity

if TYPE_CHECKING:
    from ...permissions.services import RoleCatalog

logger = logging.getLogger(__name__)


class PrincipalResolver:
    """Resolves the hierarchy tier of a session's role server-side.

    The base role is always looked up through the role catalog; nothing the
    client sends is trusted for it.
    """

    def __init__(self, role_catalog: "RoleCatalog"):
        self.role_catalog = role_catalog

    async def resolve(self, session: SessionIdentity) -> PrincipalContext:
        role = await self.role_catalog.find_role(session.role_name, session.tenant_id)
        base_role: BaseRole = role.base_role
        logger.debug(
            f"Resolved principal {session.user_id}: role={session.role_name} base={base_role.value}"
        )
        return PrincipalContext.from_session(session, base_role)
