"""
Main entry point for the skillscout package.

Usage:
    python -m skillscout [command] [options]

See 'python -m skillscout --help' for available commands.
"""

import sys

from skillscout.cli import main

if __name__ == "__main__":
    sys.exit(main())
