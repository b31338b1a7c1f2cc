"""Command line interface for the Cally account manager."""

import argparse
import sys

from cally_accounts import __version__
from cally_accounts.cli.commands import (
    list_commands,
    setup_accounts_parser,
    setup_auth_parser,
)
from cally_accounts.config import DEFAULT_CONFIG_PATH, load_config
from cally_accounts.utils.logging import get_logger, setup_logger

# Initialize logger
logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        An argparse.ArgumentParser object.
    """
    parser = argparse.ArgumentParser(
        prog="cally-accounts",
        description="Cally account manager - link and manage Google, Jira and GitHub accounts",
    )

    # Global arguments
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from config, else INFO)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        help="Command to execute",
        required=False,
    )

    setup_accounts_parser(subparsers)
    setup_auth_parser(subparsers)

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments. If None, sys.argv[1:] is used.

    Returns:
        Exit code.
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # If no command provided, show help
    if not hasattr(parsed_args, "func"):
        parser.print_help()
        list_commands()
        return 0

    try:
        config = load_config(parsed_args.config)
    except Exception as e:
        print(f"Error: invalid configuration: {e}")
        return 1

    setup_logger(config, parsed_args.log_level)
    parsed_args.app_config = config

    try:
        parsed_args.func(parsed_args)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        logger.exception(f"Error executing command: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
