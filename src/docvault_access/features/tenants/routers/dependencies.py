"""Principal dependency shared by every router.

The host application authenticates the request, builds a SessionIdentity and
resolves it with PrincipalResolver; it then overrides ``get_current_principal``
via ``app.dependency_overrides``.
"""

from typing import Any, Type, TypeVar

from fastapi import HTTPException, status

from ....core.exceptions import ValidationError
from ..entities import PrincipalContext

T = TypeVar("T")


def get_current_principal() -> PrincipalContext:
    """Placeholder for the authenticated principal.

    Applications must override this via:
    app.dependency_overrides[get_current_principal] = resolve_principal
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Principal resolution not configured. Application must provide get_current_principal.",
    )


def parse_identifier(id_type: Type[T], value: Any, field: str) -> T:
    """Build an identifier value object from a path parameter."""
    try:
        return id_type(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field)
