"""Session commands for the Cally account manager."""

import argparse
from typing import Any

from cally_accounts.cli.commands.utils import get_config
from cally_accounts.session.session_store import SessionStore
from cally_accounts.utils.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


def setup_auth_parser(subparsers: Any) -> None:
    """Set up the parser for the auth command.

    Args:
        subparsers: Subparser object to add the auth command to.
    """
    auth_parser = subparsers.add_parser("auth", help="Manage the Cally session token")
    auth_subparsers = auth_parser.add_subparsers(dest="auth_command", help="Auth command")

    login_parser = auth_subparsers.add_parser("login", help="Store the tokens from the sign-in callback")
    login_parser.add_argument("--token", required=True, help="Access token")
    login_parser.add_argument("--refresh", help="Refresh token")

    auth_subparsers.add_parser("logout", help="Forget the stored tokens")
    auth_subparsers.add_parser("status", help="Show whether a token is stored")

    auth_parser.set_defaults(func=auth_command)


def auth_command(args: argparse.Namespace) -> None:
    """Execute the auth command.

    Args:
        args: Command line arguments.
    """
    store = SessionStore(get_config(args).session_path)

    if args.auth_command == "login":
        store.set_tokens(args.token, args.refresh)
        print(f"Session saved to {store.path}")
    elif args.auth_command == "logout":
        store.clear()
        print("Signed out.")
    elif args.auth_command == "status":
        if store.get("access_token"):
            print(f"Signed in (session at {store.path})")
        else:
            print("Not signed in. Use: auth login --token <token>")
    else:
        logger.error("No auth command specified")
        print("Error: Please specify an auth command (login, logout, status)")
