"""File access request and response models."""

from .requests import LockRequest, UnlockRequest
from .responses import AccessDecisionResponse, FileLockResponse

__all__ = ["LockRequest", "UnlockRequest", "AccessDecisionResponse", "FileLockResponse"]
