"""Utility functions for CLI commands."""

import argparse
import asyncio
import json
import webbrowser
from typing import Any

import yaml

from cally_accounts.config import AppConfig, load_config
from cally_accounts.linking.orchestrator import Navigator
from cally_accounts.manager import AccountManager
from cally_accounts.mutations.operations import ConfirmationRequest, Confirmer
from cally_accounts.utils.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


def list_commands() -> None:
    """Print available commands."""
    logger.info("Listing available commands")
    print("Available commands:")
    print("  accounts - List, add, rename, promote and remove linked accounts")
    print("  auth     - Store or clear the Cally session token")
    print("\nFor more information on a command, use: <command> --help")


def get_config(args: argparse.Namespace) -> AppConfig:
    """Get the configuration attached by the entry point, or load it."""
    config = getattr(args, "app_config", None)
    if isinstance(config, AppConfig):
        return config
    return load_config(getattr(args, "config", "config.yaml"))


def browser_navigator(open_browser: bool = True) -> Navigator:
    """Build a navigator that sends the user to the authorization page.

    Args:
        open_browser: Open the system browser; otherwise only print the URL.
    """

    def navigate(url: str) -> None:
        print("Complete the authorization in your browser:")
        print(f"  {url}")
        if open_browser and not webbrowser.open(url):
            logger.warning("Could not open a browser; open the URL above manually")

    return navigate


def prompt_confirmer(assume_yes: bool = False) -> Confirmer:
    """Build a confirmer that asks on the terminal.

    Args:
        assume_yes: Confirm without asking.
    """

    async def confirm(request: ConfirmationRequest) -> bool:
        if assume_yes:
            return True
        target = request.account.display_name() if request.account else request.account_id
        print(f"{request.message}\nAccount: {target}")
        answer = await asyncio.to_thread(input, "Continue? [y/N] ")
        return answer.strip().lower() in ("y", "yes")

    return confirm


def build_manager(args: argparse.Namespace) -> AccountManager:
    """Create an account manager for a CLI invocation."""
    return AccountManager.from_config(
        get_config(args),
        navigator=browser_navigator(not getattr(args, "no_browser", False)),
        confirmer=prompt_confirmer(getattr(args, "yes", False)),
    )


def print_data(data: Any, output: str) -> None:
    """Print structured data as JSON or YAML."""
    if output == "json":
        print(json.dumps(data, indent=2, default=str))
    else:
        print(yaml.dump(data, default_flow_style=False, allow_unicode=True))
