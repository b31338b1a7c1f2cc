"""Errors raised while talking to the accounts API."""

from typing import Optional


class AccountsError(Exception):
    """Base class for account manager failures."""


class TransportError(AccountsError):
    """The request never produced an HTTP response."""


class MissingCredentialError(TransportError):
    """No bearer token is available for the request."""


class ApiStatusError(AccountsError):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, error: Optional[str] = None, message: Optional[str] = None):
        self.status_code = status_code
        self.error = error
        self.message = message
        detail = ": ".join(part for part in (error, message) if part)
        super().__init__(f"HTTP {status_code}" + (f" ({detail})" if detail else ""))


class InvalidResponseError(AccountsError):
    """The response body does not have the expected shape."""
