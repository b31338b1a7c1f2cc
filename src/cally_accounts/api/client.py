"""HTTP client for the Cally accounts API."""

import json
from typing import Any, Dict, List, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from cally_accounts.api.errors import (
    ApiStatusError,
    InvalidResponseError,
    MissingCredentialError,
    TransportError,
)
from cally_accounts.models.account import (
    Account,
    AccountSnapshot,
    AccountStats,
    parse_snapshot,
)
from cally_accounts.session.session_store import SessionContext


class AccountsApiClient:
    """Blocking client for the ``/api/accounts`` endpoints.

    Every call raises an :class:`~cally_accounts.api.errors.AccountsError`
    subclass on failure; callers decide how to report it.
    """

    def __init__(
        self,
        session: SessionContext,
        timeout: float = 10,
        http: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Credential and base URL for this run.
            timeout: Seconds before a request is abandoned.
            http: Optional requests session, mainly for tests.
        """
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.session.api_url.rstrip('/')}{path}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send an authenticated request and decode the JSON answer.

        Args:
            method: HTTP method.
            path: API path starting with ``/``.
            payload: Optional JSON body.

        Returns:
            The decoded body, or an empty dict when there is none.

        Raises:
            MissingCredentialError: There is no bearer token.
            TransportError: The request failed before a response arrived.
            ApiStatusError: The response status is not 2xx.
            InvalidResponseError: The body is not a JSON object.
        """
        if not self.session.authenticated:
            raise MissingCredentialError(f"Not signed in; cannot {method} {path}")

        headers = {"Accept": "application/json", **self.session.authorization_header()}
        if payload is not None:
            headers["Content-Type"] = "application/json"
            logger.debug(f"{method} {path} payload: {json.dumps(payload, default=str)}")

        try:
            response = self.http.request(
                method,
                self._url(path),
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            error, message = _error_details(response)
            raise ApiStatusError(response.status_code, error, message)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise InvalidResponseError(f"{method} {path} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise InvalidResponseError(f"{method} {path} returned {type(body).__name__}, expected object")
        return body

    def get_accounts(self) -> AccountSnapshot:
        """Fetch every linked account grouped by provider."""
        body = self._request("GET", "/api/accounts")
        accounts = body.get("accounts") or {}
        if not isinstance(accounts, dict):
            raise InvalidResponseError("'accounts' is not an object")
        try:
            return parse_snapshot(accounts)
        except (ValidationError, TypeError) as e:
            raise InvalidResponseError(f"Malformed account list: {e}") from e

    def get_accounts_by_provider(self, provider: str) -> List[Account]:
        """Fetch the linked accounts of a single provider."""
        body = self._request("GET", f"/api/accounts/provider/{provider}")
        raw_accounts = body.get("accounts") or []
        if not isinstance(raw_accounts, list):
            raise InvalidResponseError("'accounts' is not a list")
        try:
            return [Account.model_validate({"provider": provider, **raw}) for raw in raw_accounts]
        except (ValidationError, TypeError) as e:
            raise InvalidResponseError(f"Malformed account list: {e}") from e

    def get_stats(self) -> AccountStats:
        """Fetch the aggregate statistics."""
        body = self._request("GET", "/api/accounts/stats")
        try:
            return AccountStats.model_validate(body.get("stats") or {})
        except ValidationError as e:
            raise InvalidResponseError(f"Malformed statistics: {e}") from e

    def initiate_link(self, path: str, account_name: str) -> str:
        """Ask the API to start linking an account.

        Args:
            path: Initiation endpoint of the provider.
            account_name: Display name for the new account.

        Returns:
            The authorization URL the user agent must open.
        """
        body = self._request("POST", path, {"accountName": account_name})
        auth_url = body.get("authUrl")
        if not auth_url:
            raise InvalidResponseError(f"POST {path} returned no authUrl")
        return auth_url

    def remove_account(self, account_id: str) -> None:
        self._request("DELETE", f"/api/accounts/{account_id}")

    def set_primary(self, account_id: str) -> None:
        self._request("PUT", f"/api/accounts/{account_id}/primary")

    def update_name(self, account_id: str, name: str) -> None:
        self._request("PUT", f"/api/accounts/{account_id}/name", {"name": name})

    def close(self) -> None:
        self.http.close()


def _error_details(response: requests.Response):
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    return body.get("error"), body.get("message")
