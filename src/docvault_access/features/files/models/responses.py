"""File access response models for API endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..entities import AccessDecision, FileRecord


class AccessDecisionResponse(BaseModel):
    """Response model for an access check."""

    allowed: bool = Field(..., description="Whether the operation is permitted")
    reason: Optional[str] = Field(None, description="Denial reason code")
    message: Optional[str] = Field(None, description="Human readable denial reason")

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "AccessDecisionResponse":
        if decision.allowed:
            return cls(allowed=True)
        return cls(allowed=False, reason=decision.reason.value, message=decision.reason.message)


class FileLockResponse(BaseModel):
    """Lock state of a file after a transition. Never includes the password hash."""

    file_id: str
    is_locked: bool
    locked_by: Optional[str] = None
    locked_at: Optional[datetime] = None
    required_role: Optional[str] = None
    has_password: bool = False

    @classmethod
    def from_record(cls, file: FileRecord) -> "FileLockResponse":
        return cls(
            file_id=str(file.id),
            is_locked=file.is_locked,
            locked_by=str(file.locked_by) if file.locked_by else None,
            locked_at=file.locked_at,
            required_role=file.lock_required_role.value if file.lock_required_role else None,
            has_password=file.lock_password_hash is not None,
        )
