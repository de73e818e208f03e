"""Shared router dependencies."""

from .dependencies import get_current_principal, parse_identifier

__all__ = ["get_current_principal", "parse_identifier"]
