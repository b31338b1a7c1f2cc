"""Remove, promote and rename linked accounts."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from cally_accounts.api.client import AccountsApiClient
from cally_accounts.api.errors import AccountsError
from cally_accounts.models.account import Account
from cally_accounts.sync.sync_engine import SyncEngine
from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)

REMOVE_WARNING = "Are you sure you want to remove this account? All associated data will be deleted."


class ConfirmationRequest(BaseModel):
    """A yes/no question put to the user before a destructive call."""

    action: str
    account_id: str
    account: Optional[Account] = None
    message: str


# Presents the request through whatever UI is available and resolves to
# the user's decision.
Confirmer = Callable[[ConfirmationRequest], Awaitable[bool]]


class AccountMutations:
    """Each operation is one remote call followed by a full refresh.

    A refresh is only issued once the mutation itself has succeeded. When
    the call fails nothing is refreshed, so the store keeps its last
    known-good state.
    """

    def __init__(self, client: AccountsApiClient, sync: SyncEngine, confirmer: Confirmer) -> None:
        self.client = client
        self.sync = sync
        self.confirmer = confirmer

    async def _call(self, description: str, func: Callable[..., Any], *args: Any) -> bool:
        try:
            await asyncio.to_thread(func, *args)
        except AccountsError as e:
            logger.error(f"Error {description}: {e}")
            return False
        return True

    async def remove(self, account_id: str) -> bool:
        """Remove an account and, server-side, all of its integration data.

        The user must confirm first; a declined confirmation issues nothing.

        Args:
            account_id: Id of the account to remove.

        Returns:
            True if the account was removed.
        """
        request = ConfirmationRequest(
            action="remove",
            account_id=account_id,
            account=self.sync.store.find(account_id),
            message=REMOVE_WARNING,
        )
        if not await self.confirmer(request):
            logger.info("Removal of account {} cancelled", account_id)
            return False

        if not await self._call("removing account", self.client.remove_account, account_id):
            return False

        logger.info("Removed account {}", account_id)
        await self.sync.refresh_accounts()
        await self.sync.refresh_statistics()
        return True

    async def set_primary(self, account_id: str) -> bool:
        """Make an account the primary one.

        Demoting the previous primary is the server's job; the change is
        visible once the refresh completes.
        """
        if not await self._call("setting primary account", self.client.set_primary, account_id):
            return False

        logger.info("Account {} set as primary", account_id)
        await self.sync.refresh_accounts()
        return True

    async def rename(self, account_id: str, new_name: str) -> bool:
        """Change the display name of an account.

        Args:
            account_id: Id of the account to rename.
            new_name: The new name; surrounding whitespace is dropped.

        Returns:
            True if the name was changed. Blank or unchanged names are
            refused without a request.
        """
        name = (new_name or "").strip()
        if not name:
            logger.warning("Refusing to rename account {} to an empty name", account_id)
            return False

        current = self.sync.store.find(account_id)
        if current is not None and current.display_name() == name:
            logger.info("Account {} is already named '{}'", account_id, name)
            return False

        if not await self._call("updating account name", self.client.update_name, account_id, name):
            return False

        logger.info("Account {} renamed to '{}'", account_id, name)
        await self.sync.refresh_accounts()
        return True
