"""File lock request models for API endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class LockRequest(BaseModel):
    """Request model for locking a file."""

    password: Optional[str] = Field(None, max_length=72, description="Optional unlock password")
    required_role: Optional[str] = Field(
        None, description="Minimum role allowed to unlock (Employee, Manager or Admin)"
    )


class UnlockRequest(BaseModel):
    """Request model for unlocking a file."""

    password: Optional[str] = Field(None, max_length=72, description="Lock password, if the lock has one")
