"""Tests for the account manager facade."""

import asyncio

from cally_accounts.config import AppConfig
from cally_accounts.linking.orchestrator import LinkState
from cally_accounts.manager import AccountManager
from cally_accounts.providers.registry import is_linkable
from cally_accounts.session.session_store import SessionStore


def test_from_config_injects_session_credential(tmp_path, navigator, confirm_yes):
    session_path = tmp_path / "session.json"
    SessionStore(str(session_path)).set_tokens("stored-token")
    config = AppConfig(
        api_url="https://cally.example.com",
        request_timeout=4,
        session_path=str(session_path),
        providers={"jira": {"linkable": True}},
    )

    manager = AccountManager.from_config(config, navigator, confirm_yes)

    assert manager.client.session.access_token == "stored-token"
    assert manager.client.session.api_url == "https://cally.example.com"
    assert manager.client.timeout == 4
    assert is_linkable("jira") is True
    manager.close()


def test_credential_is_read_once(tmp_path, navigator, confirm_yes):
    session_path = tmp_path / "session.json"
    store = SessionStore(str(session_path))
    store.set_tokens("first")
    manager = AccountManager.from_config(AppConfig(session_path=str(session_path)), navigator, confirm_yes)

    store.set_tokens("second")

    assert manager.client.session.access_token == "first"
    manager.close()


def test_full_flow(fake_api, navigator, confirm_yes):
    manager = AccountManager(fake_api, navigator, confirm_yes)

    async def run():
        await manager.load()
        await manager.add_account("google", "Side project")
        await manager.set_primary("a2")
        await manager.rename_account("a2", "Home")
        await manager.remove_account("j1")

    asyncio.run(run())

    view = manager.view()
    assert [section.provider for section in view.sections] == ["google"]
    assert [(row.name, row.is_primary) for row in view.sections[0].accounts] == [
        ("Work", False),
        ("Home", True),
    ]
    assert view.summary[0].value == 2
    assert manager.linking.state("google") is LinkState.REDIRECTING


def test_load_resets_link_state(fake_api, navigator, confirm_yes):
    manager = AccountManager(fake_api, navigator, confirm_yes)
    asyncio.run(manager.add_account("google"))

    asyncio.run(manager.load())

    assert manager.linking.state("google") is LinkState.IDLE


def test_accounts_for_does_not_touch_store(fake_api, navigator, confirm_yes):
    manager = AccountManager(fake_api, navigator, confirm_yes)

    accounts = manager.accounts_for("google")

    assert [a.id for a in accounts] == ["a1", "a2"]
    assert manager.store.accounts == {}


def test_load_consumes_recorded_return_location(tmp_path, fake_api, navigator, confirm_yes):
    session = SessionStore(str(tmp_path / "session.json"))
    session.set_tokens("token")
    manager = AccountManager(fake_api, navigator, confirm_yes, session_store=session, return_location="/settings")

    asyncio.run(manager.add_account("google"))
    assert session.get("oauth_return_url") == "/settings"

    assert asyncio.run(manager.load()) is True

    assert session.get("oauth_return_url") is None
    assert session.get("access_token") == "token"
    assert manager.linking.state("google") is LinkState.IDLE
