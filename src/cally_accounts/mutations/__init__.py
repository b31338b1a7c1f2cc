"""Account mutations."""
