"""Account management commands."""

import argparse
import asyncio
import sys
import time
from typing import Any

import schedule

from cally_accounts.api.errors import AccountsError
from cally_accounts.cli.commands.utils import build_manager, print_data
from cally_accounts.manager import AccountManager
from cally_accounts.models.account import snapshot_to_dict
from cally_accounts.presentation.adapter import render_text
from cally_accounts.providers.registry import registered_providers
from cally_accounts.utils.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

OUTPUT_CHOICES = ["text", "json", "yaml"]


def setup_accounts_parser(subparsers: Any) -> None:
    """Set up the parser for the accounts command.

    Args:
        subparsers: Subparser object to add the accounts command to.
    """
    accounts_parser = subparsers.add_parser("accounts", help="Manage linked integration accounts")
    accounts_subparsers = accounts_parser.add_subparsers(dest="accounts_command", help="Accounts command")

    list_parser = accounts_subparsers.add_parser("list", help="List linked accounts")
    list_parser.add_argument(
        "--provider",
        help="Only list accounts of this provider",
    )
    list_parser.add_argument(
        "--output",
        choices=OUTPUT_CHOICES,
        default="text",
        help="Output format (default: text)",
    )

    stats_parser = accounts_subparsers.add_parser("stats", help="Show account statistics")
    stats_parser.add_argument(
        "--output",
        choices=OUTPUT_CHOICES,
        default="text",
        help="Output format (default: text)",
    )

    add_parser = accounts_subparsers.add_parser("add", help="Link a new account")
    add_parser.add_argument(
        "provider",
        help="Provider to link ({})".format(", ".join(d.tag for d in registered_providers())),
    )
    add_parser.add_argument(
        "--name",
        default="",
        help="Display name for the account (default: '<provider> Account')",
    )
    add_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the authorization URL instead of opening a browser",
    )

    remove_parser = accounts_subparsers.add_parser(
        "remove", help="Remove an account and all of its associated data"
    )
    remove_parser.add_argument("account_id", help="ID of the account to remove")
    remove_parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )

    rename_parser = accounts_subparsers.add_parser("rename", help="Rename an account")
    rename_parser.add_argument("account_id", help="ID of the account to rename")
    rename_parser.add_argument("name", help="New display name")

    primary_parser = accounts_subparsers.add_parser("primary", help="Set the primary account")
    primary_parser.add_argument("account_id", help="ID of the account to promote")

    watch_parser = accounts_subparsers.add_parser(
        "watch", help="Refresh periodically and print the accounts when they change"
    )
    watch_parser.add_argument(
        "--interval",
        type=int,
        default=5,
        help="Seconds between refreshes (default: 5)",
    )
    watch_parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Stop after this many refreshes (default: run until interrupted)",
    )

    accounts_parser.set_defaults(func=accounts_command)


def accounts_command(args: argparse.Namespace) -> None:
    """Execute the accounts command.

    Args:
        args: Command line arguments.
    """
    if not hasattr(args, "accounts_command") or args.accounts_command is None:
        logger.error("No accounts command specified")
        print("Error: Please specify an accounts command (list, stats, add, remove, rename, primary, watch)")
        print("For more information, use: accounts --help")
        return

    handlers = {
        "list": handle_list_command,
        "stats": handle_stats_command,
        "add": handle_add_command,
        "remove": handle_remove_command,
        "rename": handle_rename_command,
        "primary": handle_primary_command,
        "watch": handle_watch_command,
    }

    manager = build_manager(args)
    try:
        ok = handlers[args.accounts_command](manager, args)
    finally:
        manager.close()

    if not ok:
        sys.exit(1)


def handle_list_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the list command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """
    if args.provider:
        logger.info("Listing {} accounts", args.provider)
        try:
            accounts = manager.accounts_for(args.provider)
        except AccountsError as e:
            logger.error("Error fetching {} accounts: {}", args.provider, e)
            print(f"Error: could not load {args.provider} accounts: {e}")
            return False
        if args.output != "text":
            print_data([account.to_dict() for account in accounts], args.output)
        elif not accounts:
            print(f"No {args.provider} accounts connected.")
        else:
            for account in accounts:
                star = " *" if account.is_primary else ""
                print(f"[{account.id}] {account.display_name()}{star} {account.email or ''}".rstrip())
        return True

    if not asyncio.run(manager.load()):
        print(f"Error: could not load accounts: {manager.sync.accounts_error}")
        return False

    if args.output == "text":
        print(render_text(manager.view()))
    else:
        print_data(snapshot_to_dict(manager.store.accounts), args.output)
    return True


def handle_stats_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the stats command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """
    if not asyncio.run(manager.sync.refresh_statistics()):
        print(f"Error: could not load statistics: {manager.sync.stats_error}")
        return False

    stats = manager.store.stats
    if args.output != "text":
        print_data(stats.to_dict(), args.output)
        return True

    print("Account Statistics:")
    print(f"  Total accounts: {stats.total_accounts}")
    for provider, entry in stats.by_provider.items():
        print(f"  {provider}: {entry.count}")
    return True


def handle_add_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the add command.

    Linking finishes in the browser; run ``accounts list`` or ``accounts
    watch`` afterwards to see the new account.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """
    if not manager.linking.can_request(args.provider):
        print(f"Error: linking {args.provider} accounts is not available")
        return False

    if not asyncio.run(manager.add_account(args.provider, args.name)):
        print(f"Error: failed to start adding a {args.provider} account")
        return False

    print("The new account will appear once authorization completes.")
    return True


def handle_remove_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the remove command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """

    async def remove() -> bool:
        # Load first so the confirmation can show the account name.
        await manager.sync.refresh_accounts()
        return await manager.remove_account(args.account_id)

    if not asyncio.run(remove()):
        print(f"Account {args.account_id} was not removed.")
        return False

    print(f"Account {args.account_id} removed.")
    return True


def handle_rename_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the rename command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """

    async def rename() -> bool:
        await manager.sync.refresh_accounts()
        return await manager.rename_account(args.account_id, args.name)

    if not asyncio.run(rename()):
        print(f"Account {args.account_id} was not renamed.")
        return False

    print(f"Account {args.account_id} renamed to '{args.name.strip()}'.")
    return True


def handle_primary_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the primary command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """
    if not asyncio.run(manager.set_primary(args.account_id)):
        print(f"Error: could not set account {args.account_id} as primary")
        return False

    promoted = manager.store.find(args.account_id)
    primary = manager.store.primary_account(promoted.provider) if promoted else None
    if primary is not None:
        print(f"Primary account: {primary.display_name()} [{primary.id}]")
    return True


def handle_watch_command(manager: AccountManager, args: argparse.Namespace) -> bool:
    """Handle the watch command.

    Args:
        manager: AccountManager instance
        args: Command line arguments
    """
    scheduler = schedule.Scheduler()
    state = {"runs": 0, "last": None}

    def refresh():
        asyncio.run(manager.load())
        text = render_text(manager.view())
        if text != state["last"]:
            print(text)
            print("=" * 80)
            state["last"] = text
        state["runs"] += 1
        if args.count is not None and state["runs"] >= args.count:
            return schedule.CancelJob

    logger.info("Refreshing accounts every {} seconds", args.interval)
    if refresh() is schedule.CancelJob:
        return True
    scheduler.every(args.interval).seconds.do(refresh)

    try:
        while scheduler.jobs:
            scheduler.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Watch stopped by user")
    return True
