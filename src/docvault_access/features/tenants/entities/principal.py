"""Principal entities for the tenants feature.

``SessionIdentity`` is what the session provider hands over after
authentication. ``PrincipalContext`` is the request-scoped identity the
engine decides against: the same facts plus the base tier resolved
server-side from the role catalog.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ....config.constants import BaseRole, UserStatus
from ....core.value_objects import DepartmentId, TenantId, UserId


def _frozen(values: Optional[Iterable]) -> frozenset:
    return frozenset(values or ())


@dataclass(frozen=True)
class SessionIdentity:
    """Verified identity as supplied by the session provider."""

    user_id: UserId
    tenant_id: TenantId
    role_name: str
    department_id: Optional[DepartmentId] = None
    allowed_department_ids: FrozenSet[DepartmentId] = field(default_factory=frozenset)
    allowed_tenant_ids: FrozenSet[TenantId] = field(default_factory=frozenset)
    status: UserStatus = UserStatus.ACTIVE

    def __post_init__(self):
        object.__setattr__(self, "allowed_department_ids", _frozen(self.allowed_department_ids))
        object.__setattr__(self, "allowed_tenant_ids", _frozen(self.allowed_tenant_ids))


@dataclass(frozen=True)
class PrincipalContext:
    """Resolved identity of the caller for one request. Immutable."""

    user_id: UserId
    tenant_id: TenantId
    role_name: str
    base_role: BaseRole
    department_id: Optional[DepartmentId] = None
    allowed_department_ids: FrozenSet[DepartmentId] = field(default_factory=frozenset)
    allowed_tenant_ids: FrozenSet[TenantId] = field(default_factory=frozenset)
    status: UserStatus = UserStatus.ACTIVE

    def __post_init__(self):
        object.__setattr__(self, "allowed_department_ids", _frozen(self.allowed_department_ids))
        object.__setattr__(self, "allowed_tenant_ids", _frozen(self.allowed_tenant_ids))

    @property
    def is_super_admin(self) -> bool:
        return self.base_role == BaseRole.SUPER_ADMIN

    @property
    def is_suspended(self) -> bool:
        return self.status == UserStatus.SUSPENDED

    def at_least(self, role: BaseRole) -> bool:
        """Whether this principal's tier is ``role`` or higher."""
        return self.base_role.at_least(role)

    def in_department(self, department_id: Optional[DepartmentId]) -> bool:
        """Primary department or explicit allow-list membership."""
        if department_id is None:
            return False
        return department_id == self.department_id or department_id in self.allowed_department_ids

    @classmethod
    def from_session(cls, session: SessionIdentity, base_role: BaseRole) -> "PrincipalContext":
        return cls(
            user_id=session.user_id,
            tenant_id=session.tenant_id,
            role_name=session.role_name,
            base_role=base_role,
            department_id=session.department_id,
            allowed_department_ids=session.allowed_department_ids,
            allowed_tenant_ids=session.allowed_tenant_ids,
            status=session.status,
        )
