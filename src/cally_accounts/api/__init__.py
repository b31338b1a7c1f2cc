"""Remote API client and errors."""
