"""Account integration manager: wires the components together."""

from typing import List, Optional

from cally_accounts.api.client import AccountsApiClient
from cally_accounts.config import AppConfig
from cally_accounts.linking.orchestrator import LinkOrchestrator, Navigator
from cally_accounts.models.account import Account
from cally_accounts.mutations.operations import AccountMutations, Confirmer
from cally_accounts.presentation.adapter import AccountManagerView, build_view
from cally_accounts.providers.registry import apply_overrides
from cally_accounts.session.session_store import SessionStore
from cally_accounts.store.account_store import AccountStore
from cally_accounts.sync.sync_engine import SyncEngine
from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)


class AccountManager:
    """Links, renames, promotes and unlinks third-party accounts."""

    def __init__(
        self,
        client: AccountsApiClient,
        navigator: Navigator,
        confirmer: Confirmer,
        session_store: Optional[SessionStore] = None,
        return_location: str = "/accounts",
    ) -> None:
        self.client = client
        self.session_store = session_store
        self.store = AccountStore()
        self.sync = SyncEngine(client, self.store)
        self.linking = LinkOrchestrator(client, navigator, session_store, return_location)
        self.mutations = AccountMutations(client, self.sync, confirmer)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        navigator: Navigator,
        confirmer: Confirmer,
    ) -> "AccountManager":
        """Build a manager for one session.

        The credential is read from the session file once, here, and then
        handed to the API client.

        Args:
            config: Application configuration.
            navigator: Opens authorization URLs.
            confirmer: Asks the user to confirm removals.

        Returns:
            A ready manager; call :meth:`load` to fetch data.
        """
        apply_overrides(config.providers)
        session_store = SessionStore(config.session_path)
        context = session_store.context(config.api_url, config.access_token)
        client = AccountsApiClient(context, timeout=config.request_timeout)
        return cls(client, navigator, confirmer, session_store, config.return_location)

    async def load(self) -> bool:
        """Fetch accounts and statistics, as on opening the screen.

        Re-entering the screen ends any authorization handoff: link states go
        back to idle and the recorded return location is consumed.
        """
        self.linking.reset()
        if self.session_store is not None:
            return_url = self.session_store.take_return_url()
            if return_url:
                logger.info("Returned from authorization to {}", return_url)
        return await self.sync.initial_load()

    async def add_account(self, provider: str, account_name: Optional[str] = None) -> bool:
        return await self.linking.request_link(provider, account_name)

    async def remove_account(self, account_id: str) -> bool:
        return await self.mutations.remove(account_id)

    async def set_primary(self, account_id: str) -> bool:
        return await self.mutations.set_primary(account_id)

    async def rename_account(self, account_id: str, new_name: str) -> bool:
        return await self.mutations.rename(account_id, new_name)

    def accounts_for(self, provider: str) -> List[Account]:
        """Query one provider's accounts directly, without touching the store."""
        return self.client.get_accounts_by_provider(provider)

    def view(self) -> AccountManagerView:
        return build_view(self.store, self.linking, self.sync)

    def close(self) -> None:
        self.client.close()
