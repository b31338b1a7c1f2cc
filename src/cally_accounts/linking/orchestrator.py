"""Add-account flow: request an authorization URL and hand off to it."""

import asyncio
from enum import Enum
from typing import Callable, Dict, Optional

from cally_accounts.api.client import AccountsApiClient
from cally_accounts.api.errors import AccountsError
from cally_accounts.models.account import default_account_name
from cally_accounts.providers.registry import get_provider, is_linkable
from cally_accounts.session.session_store import SessionStore
from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)

# Receives the authorization URL. Nothing comes back: the link completes
# out-of-band and shows up on the next account refresh.
Navigator = Callable[[str], None]


class LinkState(str, Enum):
    """Where an add-account attempt for one provider stands."""

    IDLE = "idle"
    REQUESTING = "requesting"
    REDIRECTING = "redirecting"


class LinkOrchestrator:
    """Drives add-account attempts, one provider at a time."""

    def __init__(
        self,
        client: AccountsApiClient,
        navigator: Navigator,
        session_store: Optional[SessionStore] = None,
        return_location: str = "/accounts",
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: API client used to initiate the link.
            navigator: Takes the user agent to the authorization URL.
            session_store: Where the return location is recorded before the
                handoff, if anywhere.
            return_location: Location to come back to after authorization.
        """
        self.client = client
        self.navigator = navigator
        self.session_store = session_store
        self.return_location = return_location
        self._states: Dict[str, LinkState] = {}

    def state(self, provider: str) -> LinkState:
        return self._states.get(provider, LinkState.IDLE)

    @property
    def active_provider(self) -> Optional[str]:
        """Get the provider whose flow is in progress, if any."""
        for provider, state in self._states.items():
            if state is not LinkState.IDLE:
                return provider
        return None

    def is_adding(self, provider: str) -> bool:
        return self.state(provider) is not LinkState.IDLE

    def can_request(self, provider: str) -> bool:
        """Check whether an add request for the provider would be accepted."""
        return is_linkable(provider) and self.active_provider is None

    def reset(self) -> None:
        """Return every provider to idle, e.g. when the app is re-entered."""
        self._states.clear()

    async def request_link(self, provider: str, account_name: Optional[str] = None) -> bool:
        """Start linking a new account for a provider.

        The request is refused before any network call when the provider
        cannot be linked or another flow is already in progress. On success
        the navigator is handed the authorization URL and the provider stays
        in ``REDIRECTING``; the new account appears after the next refresh.

        Args:
            provider: Provider tag.
            account_name: Optional display name; blank means the default.

        Returns:
            True if control was handed to the authorization surface.
        """
        if not is_linkable(provider):
            logger.warning("Linking is not available for provider {}", provider)
            return False

        active = self.active_provider
        if active is not None:
            logger.warning(
                "Ignoring add request for {}: {} flow is already {}",
                provider,
                active,
                self.state(active).value,
            )
            return False

        name = (account_name or "").strip() or default_account_name(provider)
        path = get_provider(provider).initiation_path()

        self._states[provider] = LinkState.REQUESTING
        logger.info("Requesting authorization URL for {} account '{}'", provider, name)
        try:
            auth_url = await asyncio.to_thread(self.client.initiate_link, path, name)
        except AccountsError as e:
            logger.error(f"Error adding {provider} account: {e}")
            self._states[provider] = LinkState.IDLE
            return False

        if self.session_store is not None:
            self.session_store.remember_return_url(self.return_location)

        self._states[provider] = LinkState.REDIRECTING
        logger.info("Handing off to {} authorization", provider)
        self.navigator(auth_url)
        return True
