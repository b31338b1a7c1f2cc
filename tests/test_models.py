"""Tests for the account data models."""

from datetime import datetime, timezone

from cally_accounts.models.account import (
    Account,
    AccountStats,
    default_account_name,
    parse_snapshot,
    snapshot_to_dict,
)


def test_account_reads_camel_case_fields():
    account = Account.model_validate(
        {
            "id": "a1",
            "provider": "google",
            "name": "Work",
            "email": "me@work.example.com",
            "isPrimary": True,
            "connectedAt": "2025-03-01T09:30:00Z",
        }
    )

    assert account.is_primary is True
    assert account.connected_at == datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert account.to_dict()["isPrimary"] is True


def test_numeric_ids_become_strings():
    account = Account.model_validate({"id": 42, "provider": "google"})
    assert account.id == "42"


def test_display_name_falls_back_to_provider_default():
    account = Account(id="a1", provider="google", name="")
    assert account.display_name() == "google Account"
    assert default_account_name("jira") == "jira Account"
    assert Account(id="a2", provider="google", name="  Work ").display_name() == "Work"
    assert Account(id="a3", provider="jira", name="   ").display_name() == "jira Account"


def test_parse_snapshot_keeps_server_order_and_drops_empty_providers():
    snapshot = parse_snapshot(
        {
            "google": [
                {"id": "b", "name": "Second"},
                {"id": "a", "name": "First"},
            ],
            "github": [],
        }
    )

    assert list(snapshot) == ["google"]
    assert [a.id for a in snapshot["google"]] == ["b", "a"]
    assert all(a.provider == "google" for a in snapshot["google"])


def test_snapshot_to_dict_round_trips_through_parse():
    payload = {"google": [{"id": "a1", "name": "Work", "isPrimary": True}]}
    snapshot = parse_snapshot(payload)

    assert parse_snapshot(snapshot_to_dict(snapshot)) == snapshot


def test_stats_ignore_extra_fields_and_count_unknown_providers_as_zero():
    stats = AccountStats.model_validate(
        {
            "totalAccounts": 2,
            "byProvider": {"google": {"count": 2, "accounts": [], "lastSync": "x"}},
            "generatedAt": "2025-01-01",
        }
    )

    assert stats.total_accounts == 2
    assert stats.count_for("google") == 2
    assert stats.count_for("github") == 0


def test_stats_account_summaries_take_provider_from_their_key():
    stats = AccountStats.model_validate(
        {
            "totalAccounts": 1,
            "byProvider": {
                "google": {
                    "count": 1,
                    "accounts": [{"id": "a1", "name": "Work", "isPrimary": True}],
                }
            },
        }
    )

    summary = stats.by_provider["google"].accounts[0]
    assert summary.provider == "google"
    assert summary.is_primary is True
