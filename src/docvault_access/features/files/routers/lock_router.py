"""File access and lock router.

Endpoints take the authenticated principal from ``get_current_principal`` and
the engine from ``get_access_engine``; both are placeholders overridden by
the application.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ....core.value_objects import FileId
from ...access.services import AccessEngine
from ...tenants.entities import PrincipalContext
from ...tenants.routers import get_current_principal, parse_identifier
from ..entities import FileOperation
from ..models import AccessDecisionResponse, FileLockResponse, LockRequest, UnlockRequest


logger = logging.getLogger(__name__)

file_router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={
        403: {"description": "Operation not permitted"},
        404: {"description": "File not found"},
        423: {"description": "File is locked"},
    },
)


def get_access_engine() -> AccessEngine:
    """Placeholder for access engine dependency.

    Applications must override this via:
    app.dependency_overrides[get_access_engine] = lambda: engine
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Access engine not configured. Application must provide AccessEngine implementation.",
    )


@file_router.get("/{file_id}/access", response_model=AccessDecisionResponse)
async def check_file_access(
    file_id: str = Path(..., description="File ID"),
    operation: FileOperation = Query(FileOperation.VIEW, description="Operation to check"),
    public: bool = Query(False, description="Check a public (anonymous) share"),
    principal: PrincipalContext = Depends(get_current_principal),
    engine: AccessEngine = Depends(get_access_engine),
) -> AccessDecisionResponse:
    """Check whether the caller may perform an operation on a file."""
    file = await engine.get_file(principal, parse_identifier(FileId, file_id, "file_id"))
    decision = await engine.check(principal, file, operation, public=public)
    return AccessDecisionResponse.from_decision(decision)


@file_router.post("/{file_id}/lock", response_model=FileLockResponse)
async def lock_file(
    request: LockRequest,
    file_id: str = Path(..., description="File ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    engine: AccessEngine = Depends(get_access_engine),
) -> FileLockResponse:
    """Lock a file, optionally with a password and a minimum unlock role."""
    file = await engine.lock(
        principal,
        parse_identifier(FileId, file_id, "file_id"),
        password=request.password,
        required_role=request.required_role,
    )
    return FileLockResponse.from_record(file)


@file_router.post("/{file_id}/unlock", response_model=FileLockResponse)
async def unlock_file(
    request: UnlockRequest,
    file_id: str = Path(..., description="File ID"),
    principal: PrincipalContext = Depends(get_current_principal),
    engine: AccessEngine = Depends(get_access_engine),
) -> FileLockResponse:
    """Unlock a file."""
    file = await engine.unlock(
        principal,
        parse_identifier(FileId, file_id, "file_id"),
        password=request.password,
    )
    return FileLockResponse.from_record(file)
