"""Shared types for diff search operations."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict


class ChangeSource(Enum):
    """Where a change was found."""

    WORKING = auto()  # Unstaged, working tree against index
    STAGED = auto()  # Index against last commit
    UNTRACKED = auto()  # On disk but not known to version control


class LineKind(Enum):
    """What happened to a line."""

    ADDED = auto()
    REMOVED = auto()
    CONTEXT = auto()


# Section markers introduce each change source in composite diff text.  They
# start with "=== " so they can never be mistaken for a header, hunk or
# change line.
SECTION_MARKERS: Dict[ChangeSource, str] = {
    ChangeSource.WORKING: "=== diff-search: working tree changes (unstaged) ===",
    ChangeSource.STAGED: "=== diff-search: index changes (staged) ===",
    ChangeSource.UNTRACKED: "=== diff-search: untracked files ===",
}


@dataclass(frozen=True)
class LineRecord:
    """A single changed or context line found in a diff."""

    file: str  # Repository-relative path, forward-slash separated
    line_number: int  # New-file number for added/context lines, old-file number for removed lines
    content: str  # Line text without the leading marker or trailing newline
    kind: LineKind
    source: ChangeSource


@dataclass(frozen=True)
class SearchScope:
    """Restricts a search to one file from one change source."""

    file: str
    source: ChangeSource


@dataclass
class SearchOptions:
    """Options controlling a search over line records."""

    query: str
    case_sensitive: bool = False
    whole_word: bool = False
    use_regex: bool = False
    scope: SearchScope | None = None
