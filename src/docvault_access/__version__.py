"""Version information for docvault-access."""

__version__ = "0.3.0"
