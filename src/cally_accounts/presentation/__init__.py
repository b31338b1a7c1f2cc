"""View state for the account screen."""
