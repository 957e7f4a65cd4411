"""Entry point for ``python -m richdoc``."""

import sys

from richdoc.cli import main

if __name__ == "__main__":
    sys.exit(main())
