"""Shared fixtures and utilities for diff search tests."""

import pytest
from typing import Dict, List

from diff_search.diff_search_exceptions import ToolUnavailableError, UnreadableFileError
from diff_search.diff_search_provider import DiffSourceProvider
from diff_search.diff_search_types import SECTION_MARKERS, ChangeSource


class FakeDiffSourceProvider(DiffSourceProvider):
    """In-memory diff source for testing."""

    def __init__(
        self,
        working: str = "",
        staged: str = "",
        files: Dict[str, str | None] | None = None,
        tool_missing: bool = False
    ):
        """
        Args:
            working: Diff text returned for the working tree
            staged: Diff text returned for the index
            files: Untracked files; a None value means the file cannot be read
            tool_missing: Raise ToolUnavailableError from every diff call
        """
        self.working = working
        self.staged = staged
        self.files = files or {}
        self.tool_missing = tool_missing
        self.calls: List[str] = []

    async def working_diff(self) -> str:
        self.calls.append("working")
        self._check_tool()
        return self.working

    async def staged_diff(self) -> str:
        self.calls.append("staged")
        self._check_tool()
        return self.staged

    async def untracked_files(self) -> List[str]:
        self.calls.append("untracked")
        self._check_tool()
        return list(self.files.keys())

    async def read_text_file(self, path: str) -> str:
        content = self.files.get(path)
        if content is None:
            raise UnreadableFileError(f"Cannot read {path}", {'path': path})

        return content

    def _check_tool(self) -> None:
        if self.tool_missing:
            raise ToolUnavailableError("git not found")


WORKING_DIFF = """diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@
 import os
-old_name = 1
+new_name = 1
 print(os.getcwd())
"""

STAGED_DIFF = """diff --git a/README.md b/README.md
index 1234567..89abcde 100644
--- a/README.md
+++ b/README.md
@@ -10,2 +10,3 @@
 # Title
+Added paragraph
 Footer
"""


@pytest.fixture
def fake_provider_factory():
    """Factory for in-memory diff sources."""
    def _create_provider(**kwargs):
        return FakeDiffSourceProvider(**kwargs)
    return _create_provider


@pytest.fixture
def sample_provider():
    """A diff source with one change from every source."""
    return FakeDiffSourceProvider(
        working=WORKING_DIFF,
        staged=STAGED_DIFF,
        files={"notes/todo.txt": "first line\nsecond line\n"}
    )


class DiffSearchTestHelpers:
    """Helper utilities for diff search testing."""

    @staticmethod
    def marker(source: ChangeSource) -> str:
        """Get the section marker line for a source."""
        return SECTION_MARKERS[source]

    @staticmethod
    def composite(working: str = "", staged: str = "", untracked: str = "") -> str:
        """Build composite diff text by hand."""
        parts = []
        for source, text in (
            (ChangeSource.WORKING, working),
            (ChangeSource.STAGED, staged),
            (ChangeSource.UNTRACKED, untracked)
        ):
            if text:
                parts.append(f"{SECTION_MARKERS[source]}\n{text}")

        return ''.join(parts)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return DiffSearchTestHelpers


@pytest.fixture
def working_diff_text():
    """Unstaged diff text for one modified file."""
    return WORKING_DIFF


@pytest.fixture
def staged_diff_text():
    """Staged diff text for one modified file."""
    return STAGED_DIFF
