"""Keeps the account store in line with the remote API."""

import asyncio
from typing import Optional

from cally_accounts.api.client import AccountsApiClient
from cally_accounts.api.errors import AccountsError
from cally_accounts.store.account_store import AccountStore
from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)


class SyncEngine:
    """Fetches accounts and statistics and publishes them into the store.

    Accounts and statistics are independent: either refresh may fail
    without affecting what the other has published. A failed refresh keeps
    the previously loaded data and records the failure for the view.
    """

    def __init__(self, client: AccountsApiClient, store: AccountStore) -> None:
        self.client = client
        self.store = store
        self.loading = False
        self.accounts_error: Optional[str] = None
        self.stats_error: Optional[str] = None
        self._accounts_in_flight = 0

    async def refresh_accounts(self) -> bool:
        """Re-fetch every linked account and replace the store snapshot.

        ``loading`` stays True while any accounts refresh is in flight.

        Returns:
            True if the store was replaced, False if the fetch failed.
        """
        self._accounts_in_flight += 1
        self.loading = True
        try:
            snapshot = await asyncio.to_thread(self.client.get_accounts)
        except AccountsError as e:
            logger.error(f"Error fetching accounts: {e}")
            self.accounts_error = str(e)
            return False
        finally:
            self._accounts_in_flight -= 1
            self.loading = self._accounts_in_flight > 0

        self.accounts_error = None
        self.store.publish_accounts(snapshot)
        logger.info("Loaded {} accounts", self.store.account_count())
        return True

    async def refresh_statistics(self) -> bool:
        """Re-fetch the aggregate statistics and replace them in the store.

        Returns:
            True if the statistics were replaced, False if the fetch failed.
        """
        try:
            stats = await asyncio.to_thread(self.client.get_stats)
        except AccountsError as e:
            logger.error(f"Error fetching stats: {e}")
            self.stats_error = str(e)
            return False

        self.stats_error = None
        self.store.publish_stats(stats)
        return True

    async def initial_load(self) -> bool:
        """Run both refreshes concurrently.

        ``loading`` turns False as soon as the accounts refresh settles,
        whether or not the statistics are still in flight.

        Returns:
            Whether the accounts refresh succeeded.
        """
        accounts_ok, stats_ok = await asyncio.gather(
            self.refresh_accounts(),
            self.refresh_statistics(),
        )
        if not stats_ok:
            logger.warning("Statistics unavailable; showing accounts without them")
        return accounts_ok
