"""In-memory view of the linked accounts and their statistics."""

from typing import Callable, List, Optional

from cally_accounts.models.account import Account, AccountSnapshot, AccountStats
from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)

Subscriber = Callable[["AccountStore"], None]


def primary_ids(snapshot: AccountSnapshot) -> List[str]:
    """List the ids of every account marked primary in a snapshot."""
    return [account.id for accounts in snapshot.values() for account in accounts if account.is_primary]


class AccountStore:
    """Read-only snapshot of the server's account list.

    Only the sync engine publishes into the store, and always a whole
    snapshot; nothing patches individual accounts.
    """

    def __init__(self) -> None:
        self._accounts: AccountSnapshot = {}
        self._stats = AccountStats()
        self._subscribers: List[Subscriber] = []

    @property
    def accounts(self) -> AccountSnapshot:
        # Shallow copy so callers cannot reorder the published lists.
        return {provider: list(accounts) for provider, accounts in self._accounts.items()}

    @property
    def stats(self) -> AccountStats:
        return self._stats

    def provider_names(self) -> List[str]:
        return list(self._accounts)

    def account_count(self) -> int:
        return sum(len(accounts) for accounts in self._accounts.values())

    def all_accounts(self) -> List[Account]:
        return [account for accounts in self._accounts.values() for account in accounts]

    def find(self, account_id: str) -> Optional[Account]:
        """Look up an account by id across all providers."""
        for account in self.all_accounts():
            if account.id == account_id:
                return account
        return None

    def primary_account(self, provider: Optional[str] = None) -> Optional[Account]:
        """Get the first account marked primary, optionally for one provider."""
        accounts = self._accounts.get(provider, []) if provider else self.all_accounts()
        for account in accounts:
            if account.is_primary:
                return account
        return None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback run after every publish.

        Args:
            callback: Called with the store once new data is in place.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish_accounts(self, snapshot: AccountSnapshot) -> None:
        """Replace the account snapshot wholesale.

        The server owns the primary flags. A snapshot marking more than one
        account primary is published as given and logged.

        Args:
            snapshot: The full account list as reported by the server.
        """
        primaries = primary_ids(snapshot)
        if len(primaries) > 1:
            logger.warning("Server marked {} accounts primary: {}", len(primaries), primaries)
        self._accounts = {provider: list(accounts) for provider, accounts in snapshot.items() if accounts}
        logger.debug("Published {} accounts across {} providers", self.account_count(), len(self._accounts))
        self._notify()

    def publish_stats(self, stats: AccountStats) -> None:
        """Replace the aggregate statistics wholesale."""
        self._stats = stats
        logger.debug("Published statistics: {} accounts", stats.total_accounts)
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as e:
                logger.exception(f"Store subscriber failed: {e}")
