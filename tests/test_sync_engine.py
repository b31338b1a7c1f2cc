"""Tests for the sync engine."""

import asyncio
import threading
from unittest.mock import MagicMock, patch

from cally_accounts.api.errors import InvalidResponseError, TransportError
from cally_accounts.models.account import Account, AccountStats
from cally_accounts.store.account_store import AccountStore
from cally_accounts.sync.sync_engine import SyncEngine


def test_refresh_accounts_replaces_store(fake_api):
    store = AccountStore()
    sync = SyncEngine(fake_api, store)

    assert asyncio.run(sync.refresh_accounts()) is True

    assert list(store.accounts) == ["google", "jira"]
    assert [a.id for a in store.accounts["google"]] == ["a1", "a2"]
    assert sync.accounts_error is None
    assert sync.loading is False


def test_two_refreshes_without_mutation_are_identical(fake_api):
    store = AccountStore()
    sync = SyncEngine(fake_api, store)

    asyncio.run(sync.refresh_accounts())
    first = store.accounts
    asyncio.run(sync.refresh_accounts())

    assert store.accounts == first


def test_failed_refresh_keeps_previous_accounts(fake_api):
    store = AccountStore()
    sync = SyncEngine(fake_api, store)
    asyncio.run(sync.refresh_accounts())
    before = store.accounts

    fake_api.failures["get_accounts"] = 500
    assert asyncio.run(sync.refresh_accounts()) is False

    assert store.accounts == before
    assert "500" in sync.accounts_error
    assert sync.loading is False


def test_error_clears_after_successful_refresh(fake_api):
    sync = SyncEngine(fake_api, AccountStore())
    fake_api.failures["get_accounts"] = 503
    asyncio.run(sync.refresh_accounts())

    del fake_api.failures["get_accounts"]
    asyncio.run(sync.refresh_accounts())

    assert sync.accounts_error is None


def test_statistics_failure_does_not_affect_accounts(fake_api):
    store = AccountStore()
    sync = SyncEngine(fake_api, store)
    fake_api.failures["get_stats"] = 500

    assert asyncio.run(sync.initial_load()) is True

    assert store.account_count() == 3
    assert store.stats.total_accounts == 0
    assert sync.stats_error is not None
    assert sync.accounts_error is None


def test_accounts_failure_does_not_affect_statistics(fake_api):
    store = AccountStore()
    sync = SyncEngine(fake_api, store)
    fake_api.failures["get_accounts"] = 500

    assert asyncio.run(sync.initial_load()) is False

    assert store.accounts == {}
    assert store.stats.total_accounts == 3
    assert sync.stats_error is None


def test_initial_load_issues_both_requests(fake_api):
    sync = SyncEngine(fake_api, AccountStore())
    asyncio.run(sync.initial_load())

    assert fake_api.call_count("get_accounts") == 1
    assert fake_api.call_count("get_stats") == 1


def test_loading_flag_spans_the_accounts_request():
    store = AccountStore()
    client = MagicMock()
    seen = []

    def get_accounts():
        seen.append(sync.loading)
        return {}

    client.get_accounts.side_effect = get_accounts
    client.get_stats.return_value = AccountStats()
    sync = SyncEngine(client, store)

    asyncio.run(sync.initial_load())

    assert seen == [True]
    assert sync.loading is False


def test_transport_failure_is_not_fatal():
    client = MagicMock()
    client.get_accounts.side_effect = TransportError("connection refused")
    sync = SyncEngine(client, AccountStore())

    assert asyncio.run(sync.refresh_accounts()) is False
    assert "connection refused" in sync.accounts_error


def test_one_primary_per_provider_is_loaded():
    store = AccountStore()
    client = MagicMock()
    client.get_accounts.return_value = {
        "google": [Account(id="1", provider="google", is_primary=True)],
        "jira": [Account(id="2", provider="jira", is_primary=True)],
    }
    client.get_stats.return_value = AccountStats(total_accounts=2)
    sync = SyncEngine(client, store)

    with patch("cally_accounts.store.account_store.logger") as mock_logger:
        assert asyncio.run(sync.initial_load()) is True

    assert [a.id for a in store.all_accounts()] == ["1", "2"]
    assert sync.accounts_error is None
    mock_logger.warning.assert_called_once()


def test_loading_stays_set_while_another_refresh_is_in_flight():
    store = AccountStore()
    client = MagicMock()
    slow_started = threading.Event()
    release_slow = threading.Event()
    calls = []

    def get_accounts():
        calls.append(len(calls))
        if calls[-1] == 0:
            slow_started.set()
            release_slow.wait(5)
        return {}

    client.get_accounts.side_effect = get_accounts
    sync = SyncEngine(client, store)

    async def run():
        slow = asyncio.create_task(sync.refresh_accounts())
        await asyncio.to_thread(slow_started.wait, 5)
        await sync.refresh_accounts()
        still_loading = sync.loading
        release_slow.set()
        await slow
        return still_loading

    assert asyncio.run(run()) is True
    assert sync.loading is False


def test_invalid_response_is_reported():
    client = MagicMock()
    client.get_stats.side_effect = InvalidResponseError("Malformed statistics")
    sync = SyncEngine(client, AccountStore())

    assert asyncio.run(sync.refresh_statistics()) is False
    assert sync.stats_error == "Malformed statistics"
