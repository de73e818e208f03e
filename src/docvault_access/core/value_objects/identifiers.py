"""Value objects for identifiers in docvault-access.

Immutable identifier types so that user, tenant, department, role and file
ids cannot be mixed up at call sites.
"""

from dataclasses import dataclass
from uuid import UUID, uuid4


def _coerce_uuid(owner: object, value: object, label: str) -> None:
    if isinstance(value, UUID):
        return
    try:
        object.__setattr__(owner, "value", UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise ValueError(f"{label} must be a valid UUID, got: {value!r}")


@dataclass(frozen=True)
class UserId:
    """User identifier value object."""
    value: UUID

    def __post_init__(self):
        _coerce_uuid(self, self.value, "UserId")

    @classmethod
    def generate(cls) -> "UserId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TenantId:
    """Tenant identifier value object."""
    value: UUID

    def __post_init__(self):
        _coerce_uuid(self, self.value, "TenantId")

    @classmethod
    def generate(cls) -> "TenantId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DepartmentId:
    """Department identifier value object."""
    value: UUID

    def __post_init__(self):
        _coerce_uuid(self, self.value, "DepartmentId")

    @classmethod
    def generate(cls) -> "DepartmentId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RoleId:
    """Role identifier value object."""
    value: UUID

    def __post_init__(self):
        _coerce_uuid(self, self.value, "RoleId")

    @classmethod
    def generate(cls) -> "RoleId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FileId:
    """File or folder identifier value object."""
    value: UUID

    def __post_init__(self):
        _coerce_uuid(self, self.value, "FileId")

    @classmethod
    def generate(cls) -> "FileId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)
