"""Account store."""
