"""Combine all change sources into one composite diff text."""

import logging
from typing import List

from diff_search.diff_search_exceptions import UnreadableFileError
from diff_search.diff_search_provider import DiffSourceProvider
from diff_search.diff_search_synthesizer import UntrackedDiffSynthesizer
from diff_search.diff_search_types import SECTION_MARKERS, ChangeSource


class DiffSourceAggregator:
    """
    Collects working tree, staged and untracked changes into composite diff text.

    Each source that has something to report becomes one section, introduced
    by its section marker.  Sources always appear in the order working,
    staged, untracked.  A source with no changes contributes no section.
    """

    def __init__(
        self,
        provider: DiffSourceProvider,
        synthesizer: UntrackedDiffSynthesizer | None = None
    ):
        """
        Initialize the aggregator.

        Args:
            provider: Where raw diffs and untracked files come from
            synthesizer: Builds diffs for untracked files
        """
        self._provider = provider
        self._synthesizer = synthesizer or UntrackedDiffSynthesizer()
        self._logger = logging.getLogger("DiffSourceAggregator")

    async def collect(self) -> str:
        """
        Build the composite diff text.

        Returns:
            Composite diff text, empty if nothing has changed

        Raises:
            ToolUnavailableError: If the diff tool cannot be run
            WorkspaceError: If the workspace is missing
        """
        sections: List[str] = []

        working = await self._provider.working_diff()
        self._add_section(sections, ChangeSource.WORKING, working)

        staged = await self._provider.staged_diff()
        self._add_section(sections, ChangeSource.STAGED, staged)

        untracked = await self.collect_untracked()
        self._add_section(sections, ChangeSource.UNTRACKED, untracked)

        return ''.join(sections)

    async def collect_untracked(self) -> str:
        """
        Synthesize diffs for every readable untracked file.

        Files that cannot be read are logged and skipped.

        Returns:
            Concatenated diff text for all readable untracked files
        """
        fragments: List[str] = []
        for path in await self._provider.untracked_files():
            try:
                content = await self._provider.read_text_file(path)

            except UnreadableFileError as e:
                self._logger.warning("Skipping untracked file %s: %s", path, str(e))
                continue

            fragments.append(self._synthesizer.synthesize(path, content))

        return ''.join(fragments)

    def _add_section(self, sections: List[str], source: ChangeSource, diff_text: str) -> None:
        """Append a marked section unless the source had nothing to report."""
        if not diff_text.strip():
            self._logger.debug("No %s changes", source.name.lower())
            return

        if not diff_text.endswith('\n'):
            diff_text += '\n'

        sections.append(f"{SECTION_MARKERS[source]}\n{diff_text}")
