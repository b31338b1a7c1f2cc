"""Entry point for ``python -m cally_accounts``."""

import sys

from cally_accounts.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
