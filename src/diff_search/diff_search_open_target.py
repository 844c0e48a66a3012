"""Work out how a consumer should open a search result."""

import posixpath
from dataclasses import dataclass
from enum import Enum, auto

from diff_search.diff_search_types import ChangeSource, LineKind, LineRecord


class FileRevision(Enum):
    """A version of a file that can be shown in an editor."""

    HEAD = auto()  # Last commit
    INDEX = auto()  # Staging area
    WORKING_TREE = auto()  # File on disk


@dataclass(frozen=True)
class OpenTarget:
    """
    Describes where to take the user for a search result.

    When `left` is None the file should be opened on its own; otherwise a
    comparison of `left` against `right` should be shown.  `focus_left` says
    which side of the comparison `line_number` refers to.
    """

    path: str
    line_number: int
    right: FileRevision
    left: FileRevision | None = None
    focus_left: bool = False
    title: str = ""

    @property
    def is_comparison(self) -> bool:
        """Check whether this target is a two-sided comparison."""
        return self.left is not None


def open_target_for(record: LineRecord) -> OpenTarget:
    """
    Decide how to show a line record.

    Args:
        record: The record to show

    Returns:
        Target describing the view to open and the line to reveal
    """
    file_name = posixpath.basename(record.file)

    # Removed lines only exist in the original, left-hand side
    focus_left = record.kind is LineKind.REMOVED

    if record.source is ChangeSource.UNTRACKED:
        return OpenTarget(
            path=record.file,
            line_number=record.line_number,
            right=FileRevision.WORKING_TREE,
            title=file_name
        )

    if record.source is ChangeSource.STAGED:
        return OpenTarget(
            path=record.file,
            line_number=record.line_number,
            left=FileRevision.HEAD,
            right=FileRevision.INDEX,
            focus_left=focus_left,
            title=f"{file_name} (Index)"
        )

    if record.source is ChangeSource.WORKING:
        return OpenTarget(
            path=record.file,
            line_number=record.line_number,
            left=FileRevision.INDEX,
            right=FileRevision.WORKING_TREE,
            focus_left=focus_left,
            title=f"{file_name} (Working Tree)"
        )

    raise ValueError(f"Unknown change source: {record.source}")
