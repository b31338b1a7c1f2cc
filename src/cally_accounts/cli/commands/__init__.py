"""Command modules for the Cally account manager CLI."""

from cally_accounts.cli.commands.accounts_commands import accounts_command, setup_accounts_parser
from cally_accounts.cli.commands.auth_commands import auth_command, setup_auth_parser
from cally_accounts.cli.commands.utils import list_commands

__all__ = [
    "accounts_command",
    "setup_accounts_parser",
    "auth_command",
    "setup_auth_parser",
    "list_commands",
]
