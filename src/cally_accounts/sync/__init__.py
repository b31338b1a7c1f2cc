"""Store synchronization."""
