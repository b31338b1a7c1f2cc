"""Local session storage."""
