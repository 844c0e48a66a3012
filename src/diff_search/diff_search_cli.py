"""
Diff Search - command-line search over uncommitted git changes.

Searches the added and removed lines of unstaged changes, staged changes and
untracked files in a git working tree.

Usage:
    python -m diff_search QUERY [options]

Exit status is 0 when something matched, 1 when nothing matched and 2 when
the search could not run (invalid pattern, git unavailable, no workspace).
"""

import argparse
import asyncio
import json
import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import sys
from typing import Any, Dict, List, Sequence

from diff_search.diff_search_engine import DiffSearchEngine
from diff_search.diff_search_exceptions import DiffSearchError, InvalidPatternError
from diff_search.diff_search_open_target import open_target_for
from diff_search.diff_search_provider import GitDiffSourceProvider
from diff_search.diff_search_settings import DiffSearchSettings
from diff_search.diff_search_types import ChangeSource, LineKind, LineRecord, SearchOptions, SearchScope


EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'

    @classmethod
    def disable(cls) -> None:
        """Disable colors (for non-terminal output)."""
        cls.RESET = ''
        cls.BOLD = ''
        cls.RED = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.CYAN = ''


def setup_logging(log_file: str | None, verbose: bool) -> None:
    """
    Configure logging.

    Args:
        log_file: Write logs to this rotating file instead of stderr
        verbose: Log debug messages as well as warnings and errors
    """
    handler: logging.Handler
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1024*1024,  # 1MB
            backupCount=4,
            encoding='utf-8'
        )

    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[handler],
        force=True
    )


class DiffSearchCli:
    """
    Command-line application.

    Coordinates:
    - Loading settings and merging command-line overrides
    - Running the search against the git working tree
    - Printing results as text or JSON
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application with command-line arguments.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self._logger = logging.getLogger("DiffSearchCli")

        if not sys.stdout.isatty() or args.no_color:
            Colors.disable()

    def run(self) -> int:
        """
        Run the search.

        Returns:
            Exit status
        """
        try:
            settings = self._load_settings()

        except (OSError, ValueError) as e:
            self._print_error(f"Failed to load settings: {str(e)}")
            return EXIT_ERROR

        options = self._build_options(settings)
        provider = GitDiffSourceProvider(
            Path(self.args.root),
            git_command=settings.git_command,
            max_file_size=settings.max_file_size
        )
        engine = DiffSearchEngine(provider)

        try:
            results = asyncio.run(engine.search_in_diff(options))

        except InvalidPatternError as e:
            self._print_error(str(e))
            return EXIT_ERROR

        except DiffSearchError as e:
            self._logger.error("Search failed: %s", str(e))
            self._print_error(f"Search failed: {str(e)}")
            return EXIT_ERROR

        if self.args.json:
            print(json.dumps([self.record_to_dict(record) for record in results], indent=2))

        else:
            for record in results:
                print(self.format_record(record))

            if not results:
                print(f"{Colors.YELLOW}No matches{Colors.RESET}")

        return EXIT_FOUND if results else EXIT_NOT_FOUND

    def _load_settings(self) -> DiffSearchSettings:
        """Load settings from the file named on the command line, or the default file if it exists."""
        if self.args.settings:
            return DiffSearchSettings.load(self.args.settings)

        default_path = DiffSearchSettings.default_path()
        if not os.path.exists(default_path):
            return DiffSearchSettings.create_default()

        try:
            return DiffSearchSettings.load(default_path)

        except (OSError, ValueError) as e:
            self._logger.warning("Ignoring unreadable settings file %s: %s", default_path, str(e))
            return DiffSearchSettings.create_default()

    def _build_options(self, settings: DiffSearchSettings) -> SearchOptions:
        """Merge command-line flags over the settings defaults."""
        def pick(flag: bool | None, default: bool) -> bool:
            return default if flag is None else flag

        scope = None
        if self.args.file:
            scope = SearchScope(file=self.args.file, source=ChangeSource[self.args.source.upper()])

        return SearchOptions(
            query=self.args.query,
            case_sensitive=pick(self.args.case_sensitive, settings.case_sensitive),
            whole_word=pick(self.args.whole_word, settings.whole_word),
            use_regex=pick(self.args.regex, settings.use_regex),
            scope=scope
        )

    @staticmethod
    def format_record(record: LineRecord) -> str:
        """Format a result as a single line of text."""
        if record.kind is LineKind.ADDED:
            marker = f"{Colors.GREEN}+"

        elif record.kind is LineKind.REMOVED:
            marker = f"{Colors.RED}-"

        else:
            marker = " "

        source = record.source.name.lower()
        return (
            f"{Colors.BOLD}{record.file}{Colors.RESET}:{Colors.CYAN}{record.line_number}{Colors.RESET} "
            f"[{source}] {marker}{record.content}{Colors.RESET}"
        )

    @staticmethod
    def record_to_dict(record: LineRecord) -> Dict[str, Any]:
        """Convert a result to a JSON-serializable dictionary."""
        target = open_target_for(record)
        return {
            "file": record.file,
            "lineNumber": record.line_number,
            "content": record.content,
            "kind": record.kind.name.lower(),
            "source": record.source.name.lower(),
            "open": {
                "path": target.path,
                "lineNumber": target.line_number,
                "left": target.left.name.lower() if target.left else None,
                "right": target.right.name.lower(),
                "focusLeft": target.focus_left,
                "title": target.title
            }
        }

    def _print_error(self, message: str) -> None:
        """Print error message."""
        print(f"{Colors.RED}Error:{Colors.RESET} {message}", file=sys.stderr)


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="diff_search",
        description="Search the added and removed lines of uncommitted git changes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Find a word anywhere in unstaged, staged or untracked changes
  python -m diff_search TODO

  # Regular expression, case-sensitive
  python -m diff_search --regex --case-sensitive 'def \\w+_test'

  # Only look at the staged changes to one file
  python -m diff_search logger --file src/app.py --source staged

  # Machine-readable output
  python -m diff_search --json config
        """
    )

    parser.add_argument('query', help='Text or pattern to search for')

    parser.add_argument(
        '--root',
        default='.',
        help='Root directory of the git working tree (default: current directory)'
    )

    parser.add_argument(
        '-c', '--case-sensitive',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Match case exactly'
    )

    parser.add_argument(
        '-w', '--whole-word',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Only match whole words'
    )

    parser.add_argument(
        '-r', '--regex',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Treat the query as a regular expression'
    )

    parser.add_argument('--file', help='Only search changes to this file (needs --source)')

    parser.add_argument(
        '--source',
        choices=[source.name.lower() for source in ChangeSource],
        help='Change source of the file given with --file'
    )

    parser.add_argument('--json', action='store_true', help='Print results as JSON')
    parser.add_argument('--settings', help='Settings file (default: ~/.diff_search/settings.json if present)')
    parser.add_argument('--log-file', help='Write logs to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    args = parser.parse_args(argv)
    if bool(args.file) != bool(args.source):
        parser.error('--file and --source must be used together')

    return args


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.log_file, args.verbose)
    cli = DiffSearchCli(args)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
