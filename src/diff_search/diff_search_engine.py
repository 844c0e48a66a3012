"""Top-level entry point for searching uncommitted changes."""

import logging
from typing import List

from diff_search.diff_search_aggregator import DiffSourceAggregator
from diff_search.diff_search_matcher import DiffSearchMatcher
from diff_search.diff_search_parser import DiffSearchParser
from diff_search.diff_search_provider import DiffSourceProvider
from diff_search.diff_search_synthesizer import UntrackedDiffSynthesizer
from diff_search.diff_search_types import LineRecord, SearchOptions


class DiffSearchEngine:
    """
    Fetches, parses and searches all uncommitted changes.

    Nothing is cached: every call fetches the diffs again, so results always
    reflect the current state of the repository.
    """

    def __init__(
        self,
        provider: DiffSourceProvider,
        synthesizer: UntrackedDiffSynthesizer | None = None
    ):
        """
        Initialize the engine.

        Args:
            provider: Where raw diffs and untracked files come from
            synthesizer: Builds diffs for untracked files
        """
        self._aggregator = DiffSourceAggregator(provider, synthesizer)
        self._parser = DiffSearchParser()
        self._matcher = DiffSearchMatcher()
        self._logger = logging.getLogger("DiffSearchEngine")

    async def get_all_changes(self) -> str:
        """
        Get the composite diff text for all uncommitted changes.

        Raises:
            ToolUnavailableError: If the diff tool cannot be run
            WorkspaceError: If the workspace is missing
        """
        return await self._aggregator.collect()

    async def get_parsed_diff(self) -> List[LineRecord]:
        """
        Get every uncommitted change as line records.

        Raises:
            ToolUnavailableError: If the diff tool cannot be run
            WorkspaceError: If the workspace is missing
        """
        diff_text = await self.get_all_changes()
        records = self._parser.parse(diff_text)
        self._logger.debug("Parsed %d line records", len(records))
        return records

    async def search_in_diff(self, options: SearchOptions) -> List[LineRecord]:
        """
        Search all uncommitted changes.

        Args:
            options: Query and matching options

        Returns:
            Matching added and removed lines

        Raises:
            InvalidPatternError: If a regex query is not a valid pattern
            ToolUnavailableError: If the diff tool cannot be run
            WorkspaceError: If the workspace is missing
        """
        if not options.query:
            return []

        # Reject a bad pattern before doing any I/O
        regex = self._matcher.compile_pattern(options)

        records = await self.get_parsed_diff()
        results = self._matcher.filter_records(records, options, regex)
        self._logger.debug("Query %r matched %d of %d records", options.query, len(results), len(records))
        return results
