"""
CLI entry point for Diff Search.

This allows the tool to be run as:
    python -m diff_search QUERY [options]
"""

import sys
from diff_search.diff_search_cli import main

if __name__ == "__main__":
    sys.exit(main())
