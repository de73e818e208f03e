"""Tenant-scope entities."""

from .principal import PrincipalContext, SessionIdentity

__all__ = ["PrincipalContext", "SessionIdentity"]
