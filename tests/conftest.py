"""Shared fixtures for the account manager tests."""

import threading
import time
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from cally_accounts.api.errors import ApiStatusError
from cally_accounts.models.account import Account, AccountStats, ProviderStats
from cally_accounts.providers import registry


class FakeAccountsApi:
    """In-memory stand-in for the accounts API with server-side rules.

    Exposes the same methods as ``AccountsApiClient`` and records every
    call. Set ``failures[method] = status`` to make a method fail.
    """

    def __init__(self, accounts: Optional[List[Dict[str, Any]]] = None) -> None:
        self.accounts: List[Dict[str, Any]] = [dict(a) for a in accounts or []]
        self.calls: List[tuple] = []
        self.failures: Dict[str, int] = {}
        self.link_delay = 0.0
        self.auth_url = "https://accounts.example.com/o/oauth2/auth?state=xyz"
        self._lock = threading.Lock()

    def _record(self, method: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((method, *args))
        if method in self.failures:
            raise ApiStatusError(self.failures[method], "Request failed", method)

    def call_count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    def _snapshot(self):
        grouped: Dict[str, List[Account]] = {}
        for raw in self.accounts:
            grouped.setdefault(raw["provider"], []).append(Account.model_validate(raw))
        return grouped

    def get_accounts(self):
        self._record("get_accounts")
        return self._snapshot()

    def get_accounts_by_provider(self, provider: str):
        self._record("get_accounts_by_provider", provider)
        return self._snapshot().get(provider, [])

    def get_stats(self):
        self._record("get_stats")
        snapshot = self._snapshot()
        return AccountStats(
            total_accounts=sum(len(a) for a in snapshot.values()),
            by_provider={p: ProviderStats(count=len(a), accounts=a) for p, a in snapshot.items()},
        )

    def initiate_link(self, path: str, account_name: str) -> str:
        self._record("initiate_link", path, account_name)
        if self.link_delay:
            time.sleep(self.link_delay)
        return self.auth_url

    def remove_account(self, account_id: str) -> None:
        self._record("remove_account", account_id)
        self.accounts = [a for a in self.accounts if a["id"] != account_id]

    def set_primary(self, account_id: str) -> None:
        self._record("set_primary", account_id)
        target = next((a for a in self.accounts if a["id"] == account_id), None)
        if target is None:
            raise ApiStatusError(404, "Not Found", "Account not found")
        for raw in self.accounts:
            if raw["provider"] == target["provider"]:
                raw["isPrimary"] = raw["id"] == account_id

    def update_name(self, account_id: str, name: str) -> None:
        self._record("update_name", account_id, name)
        for raw in self.accounts:
            if raw["id"] == account_id:
                raw["name"] = name

    def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def restore_provider_registry():
    """Undo provider registrations made by a test."""
    saved = dict(registry.PROVIDER_REGISTRY)
    yield
    registry.PROVIDER_REGISTRY.clear()
    registry.PROVIDER_REGISTRY.update(saved)


@pytest.fixture
def sample_accounts():
    """Two Google accounts and one Jira account, one primary per provider."""
    return [
        {
            "id": "a1",
            "provider": "google",
            "name": "Work",
            "email": "me@work.example.com",
            "isPrimary": True,
            "connectedAt": "2025-03-01T09:30:00Z",
        },
        {
            "id": "a2",
            "provider": "google",
            "name": "Personal",
            "email": "me@example.com",
            "isPrimary": False,
            "connectedAt": "2025-04-12T18:00:00Z",
        },
        {
            "id": "j1",
            "provider": "jira",
            "name": "jira Account",
            "email": "me@corp.atlassian.net",
            "isPrimary": True,
            "connectedAt": "2025-05-20T08:15:00Z",
        },
    ]


@pytest.fixture
def fake_api(sample_accounts):
    return FakeAccountsApi(sample_accounts)


@pytest.fixture
def navigator():
    return MagicMock(name="navigator")


@pytest.fixture
def confirm_yes():
    decisions = []

    async def confirm(request):
        decisions.append(request)
        return True

    confirm.requests = decisions
    return confirm


@pytest.fixture
def confirm_no():
    decisions = []

    async def confirm(request):
        decisions.append(request)
        return False

    confirm.requests = decisions
    return confirm


@pytest.fixture
def make_fake_api():
    """Factory for fakes seeded with custom accounts."""
    return FakeAccountsApi
