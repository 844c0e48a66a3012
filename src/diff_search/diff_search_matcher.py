"""Search and filter parsed diff line records."""

import re
from typing import Iterable, List

from diff_search.diff_search_exceptions import InvalidPatternError
from diff_search.diff_search_types import LineKind, LineRecord, SearchOptions, SearchScope


class DiffSearchMatcher:
    """Matches search queries against added and removed lines."""

    def compile_pattern(self, options: SearchOptions) -> re.Pattern[str]:
        """
        Build the regular expression for a query.

        Args:
            options: Search options; the query must not be empty

        Returns:
            Compiled pattern

        Raises:
            InvalidPatternError: If a regex query is not a valid pattern
        """
        pattern = options.query if options.use_regex else re.escape(options.query)
        if options.whole_word:
            pattern = rf'\b(?:{pattern})\b'

        flags = 0 if options.case_sensitive else re.IGNORECASE

        try:
            return re.compile(pattern, flags)

        except re.error as e:
            raise InvalidPatternError(
                f"Invalid regular expression: {e.msg}",
                {
                    'query': options.query,
                    'reason': e.msg,
                    'position': e.pos
                }
            ) from e

    def search(self, records: Iterable[LineRecord], options: SearchOptions) -> List[LineRecord]:
        """
        Find the records matching a query.

        Context lines are never matched.  An empty query matches nothing.

        Args:
            records: Parsed line records
            options: Query and matching options

        Returns:
            Matching records in their original order

        Raises:
            InvalidPatternError: If a regex query is not a valid pattern
        """
        if not options.query:
            return []

        return self.filter_records(records, options, self.compile_pattern(options))

    def filter_records(
        self,
        records: Iterable[LineRecord],
        options: SearchOptions,
        regex: re.Pattern[str]
    ) -> List[LineRecord]:
        """
        Find the records matching an already compiled pattern.

        Args:
            records: Parsed line records
            options: Options supplying the scope
            regex: Pattern from `compile_pattern`

        Returns:
            Matching added and removed records in their original order
        """
        candidates = (record for record in records if record.kind is not LineKind.CONTEXT)
        if options.scope is not None:
            candidates = (record for record in candidates if self.in_scope(record, options.scope))

        return [record for record in candidates if regex.search(record.content)]

    @staticmethod
    def in_scope(record: LineRecord, scope: SearchScope) -> bool:
        """
        Check whether a record belongs to a file and source.

        File paths compare case-insensitively.
        """
        return record.source is scope.source and record.file.lower() == scope.file.lower()
