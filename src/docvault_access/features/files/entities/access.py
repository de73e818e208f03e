"""File operations and access decisions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FileOperation(str, Enum):
    VIEW = "view"
    DOWNLOAD = "download"
    UPLOAD_INTO = "upload_into"
    RENAME = "rename"
    DELETE = "delete"
    SHARE = "share"
    LOCK = "lock"
    UNLOCK = "unlock"

    @property
    def is_privileged(self) -> bool:
        """Anything beyond reading content."""
        return self not in (FileOperation.VIEW, FileOperation.DOWNLOAD)


class DenialReason(str, Enum):
    SUSPENDED = "suspended"
    OUT_OF_SCOPE = "out_of_scope"
    NOT_VISIBLE = "not_visible"
    MISSING_PERMISSION = "missing_permission"
    INSUFFICIENT_ROLE = "insufficient_role"
    FILE_LOCKED = "file_locked"
    NOT_A_FOLDER = "not_a_folder"
    COMPLIANCE_RESTRICTED = "compliance_restricted"
    IMMUTABLE = "immutable"

    @property
    def message(self) -> str:
        return _DENIAL_MESSAGES[self]


_DENIAL_MESSAGES = {
    DenialReason.SUSPENDED: "Account is suspended",
    DenialReason.OUT_OF_SCOPE: "Resource not found",
    DenialReason.NOT_VISIBLE: "You do not have access to this item",
    DenialReason.MISSING_PERMISSION: "Your role does not grant this operation",
    DenialReason.INSUFFICIENT_ROLE: "Your role is not high enough for this operation",
    DenialReason.FILE_LOCKED: "File is locked",
    DenialReason.NOT_A_FOLDER: "Target is not a folder",
    DenialReason.COMPLIANCE_RESTRICTED: "Blocked by the tenant's compliance mode",
    DenialReason.IMMUTABLE: "System roles cannot be modified",
}


@dataclass(frozen=True)
class AccessDecision:
    """Allow, or Deny with a reason."""

    allowed: bool
    reason: Optional[DenialReason] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AccessDecision":
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed
