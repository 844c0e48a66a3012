"""Composite unified diff parsing."""

import re
from dataclasses import dataclass
from typing import Dict, List

from diff_search.diff_search_types import SECTION_MARKERS, ChangeSource, LineKind, LineRecord


@dataclass
class _ParserState:
    """Where the parser is within the composite diff text."""

    current_file: str = ""
    current_source: ChangeSource = ChangeSource.WORKING
    in_hunk: bool = False
    old_line: int = 0  # Last old-file line number already accounted for
    new_line: int = 0  # Last new-file line number already accounted for


class DiffSearchParser:
    """
    Parser for composite unified diff text.

    A single pass over the text turns every added, removed and context line
    into a `LineRecord`.  Malformed input never raises: lines that cannot be
    attributed to a file and hunk are dropped.
    """

    FILE_HEADER_PATTERN = re.compile(r'^diff --git a/(.+?) b/(.+)$')
    HUNK_HEADER_PATTERN = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@')

    def __init__(self) -> None:
        """Initialize the parser."""
        self._marker_sources: Dict[str, ChangeSource] = {
            marker: source for source, marker in SECTION_MARKERS.items()
        }

    def parse(self, diff_text: str) -> List[LineRecord]:
        """
        Parse composite diff text into line records.

        Args:
            diff_text: Composite diff text, possibly with section markers

        Returns:
            Records in the order they appear in the text
        """
        state = _ParserState()
        records: List[LineRecord] = []

        for line in self.split_lines(diff_text):
            source = self._marker_sources.get(line)
            if source is not None:
                state.current_source = source
                continue

            if line.startswith('diff --git'):
                self._start_file(state, line)
                continue

            # Inside a hunk these are removed "--..." or added "++..." lines
            if not state.in_hunk and (line.startswith('---') or line.startswith('+++')):
                continue

            if line.startswith('@@'):
                self._start_hunk(state, line)
                continue

            if not state.current_file or not state.in_hunk:
                continue

            record = self._parse_change_line(state, line)
            if record is not None:
                records.append(record)

        return records

    @staticmethod
    def split_lines(diff_text: str) -> List[str]:
        """
        Split diff text into lines without terminators.

        Only newlines end a line.  Form feeds and other characters that
        `str.splitlines` would break on can appear inside line content.

        Args:
            diff_text: Text to split

        Returns:
            List of lines
        """
        if not diff_text:
            return []

        lines = diff_text.split('\n')
        return [line[:-1] if line.endswith('\r') else line for line in lines]

    def _start_file(self, state: _ParserState, line: str) -> None:
        """Handle a `diff --git a/X b/Y` header, tracking the destination path."""
        path = self.destination_path(line)
        if path is None:
            return

        state.current_file = path
        state.in_hunk = False
        state.old_line = 0
        state.new_line = 0

    def destination_path(self, line: str) -> str | None:
        """
        Get the post-change path from a `diff --git a/X b/Y` header.

        Paths may themselves contain " b/".  When the file was not renamed
        both halves are identical, so splitting at the midpoint is exact;
        otherwise the first " b/" separates the paths.

        Args:
            line: Header line

        Returns:
            The destination path, or None if the line is not a valid header
        """
        paths = line[len('diff --git '):]
        if len(paths) % 2 == 1:
            middle = len(paths) // 2
            old_path = paths[:middle]
            new_path = paths[middle + 1:]
            if (
                paths[middle] == ' ' and
                old_path.startswith('a/') and
                new_path.startswith('b/') and
                old_path[2:] == new_path[2:]
            ):
                return new_path[2:]

        match = self.FILE_HEADER_PATTERN.match(line)
        if not match:
            return None

        return match.group(2)

    def _start_hunk(self, state: _ParserState, line: str) -> None:
        """Handle a `@@ -a,b +c,d @@` header by seeding the line cursors."""
        match = self.HUNK_HEADER_PATTERN.match(line)
        if not match:
            state.in_hunk = False
            return

        # Counts are optional (default 1) and not needed; only starts seed the cursors
        state.old_line = int(match.group(1)) - 1
        state.new_line = int(match.group(3)) - 1
        state.in_hunk = True

    def _parse_change_line(self, state: _ParserState, line: str) -> LineRecord | None:
        """
        Turn one hunk body line into a record, advancing the cursors.

        Returns:
            The record, or None for lines that carry no change (such as
            "\\ No newline at end of file")
        """
        if line.startswith('+'):
            state.new_line += 1
            return self._make_record(state, state.new_line, line, LineKind.ADDED)

        if line.startswith('-'):
            state.old_line += 1
            return self._make_record(state, state.old_line, line, LineKind.REMOVED)

        if line.startswith(' '):
            state.old_line += 1
            state.new_line += 1

            # Context lines report the new-file number so they can be located on the modified side
            return self._make_record(state, state.new_line, line, LineKind.CONTEXT)

        return None

    def _make_record(
        self,
        state: _ParserState,
        line_number: int,
        line: str,
        kind: LineKind
    ) -> LineRecord | None:
        """Build a record for the current file and source."""
        if line_number < 1:
            return None

        return LineRecord(
            file=state.current_file,
            line_number=line_number,
            content=line[1:],
            kind=kind,
            source=state.current_source
        )
