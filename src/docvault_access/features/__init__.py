"""Feature modules for docvault-access."""
