"""HTTP surface for docvault-access."""

from .app import create_app
from .container import AccessContainer
from .exception_handlers import register_exception_handlers

__all__ = ["create_app", "AccessContainer", "register_exception_handlers"]
