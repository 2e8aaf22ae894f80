"""
Command line entry point for Diff Updater.
This allows running the module as: python -m diff_updater
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
