"""Local session persistence and the per-run session context."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)


class SessionContext(BaseModel):
    """Credential and endpoint for one run, passed to every API call."""

    model_config = ConfigDict(frozen=True)

    api_url: str
    access_token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)

    def authorization_header(self) -> Dict[str, str]:
        """Build the bearer authorization header.

        Returns:
            Header mapping, empty when there is no token.
        """
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}


class SessionStore:
    """JSON file holding tokens and the post-authorization return location."""

    def __init__(self, path: str) -> None:
        """Initialize the session store.

        Args:
            path: Path to the session file. ``~`` is expanded.
        """
        self.path = Path(os.path.expanduser(path))

    def load(self) -> Dict[str, Any]:
        """Load the stored session data.

        Returns:
            The stored values, empty when the file is missing or unreadable.
        """
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read session file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed session file {self.path}")
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        # Tokens are secrets.
        os.chmod(self.path, 0o600)

    def get(self, key: str) -> Optional[Any]:
        return self.load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self.load()
        data[key] = value
        self._save(data)

    def pop(self, key: str) -> Optional[Any]:
        """Remove a key and return its previous value."""
        data = self.load()
        value = data.pop(key, None)
        if value is not None:
            self._save(data)
        return value

    def set_tokens(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        """Store the tokens returned by the sign-in callback."""
        data = self.load()
        data["access_token"] = access_token
        if refresh_token:
            data["refresh_token"] = refresh_token
        self._save(data)
        logger.info(f"Session saved to {self.path}")

    def clear(self) -> None:
        """Forget every stored value."""
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Session cleared at {self.path}")

    def remember_return_url(self, url: str) -> None:
        """Record where to come back after the external authorization."""
        self.set("oauth_return_url", url)

    def take_return_url(self) -> Optional[str]:
        """Read and forget the recorded return location."""
        return self.pop("oauth_return_url")

    def context(self, api_url: str, access_token: Optional[str] = None) -> SessionContext:
        """Acquire the session context for this run.

        Args:
            api_url: Base URL of the accounts API.
            access_token: Token that takes precedence over the stored one.

        Returns:
            A frozen context to inject into the API client.
        """
        token = access_token or self.get("access_token")
        if not token:
            logger.warning("No access token in session; requests will fail until you log in")
        return SessionContext(api_url=api_url, access_token=token)
