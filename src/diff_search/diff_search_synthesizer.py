"""Synthesize unified diffs for untracked files."""

from typing import List

from diff_search.diff_search_hasher import content_fingerprint


class UntrackedDiffSynthesizer:
    """
    Turns the full content of an untracked file into an "all lines added" diff.

    The output has the same shape as `git diff` produces for a new file, so the
    parser can consume it without special cases.
    """

    NULL_PATH = "dev/null"
    FILE_MODE = "100644"
    ZERO_ID = "0000000"
    NO_NEWLINE_MARKER = "\\ No newline at end of file"

    def synthesize(self, path: str, content: str) -> str:
        """
        Build a diff fragment for a new file.

        Args:
            path: Repository-relative path using forward slashes
            content: Full text content of the file

        Returns:
            Unified diff text, terminated by a newline
        """
        lines = self.split_content(content)
        parts = [
            f"diff --git a/{self.NULL_PATH} b/{path}",
            f"new file mode {self.FILE_MODE}",
            f"index {self.ZERO_ID}..{content_fingerprint(content)} {self.FILE_MODE}",
            "--- /dev/null",
            f"+++ b/{path}",
        ]

        # An empty file has no hunk at all, just as git reports it
        if lines:
            parts.append(f"@@ -0,0 +1,{len(lines)} @@")
            parts.extend(f"+{line}" for line in lines)
            if not content.endswith('\n'):
                parts.append(self.NO_NEWLINE_MARKER)

        return '\n'.join(parts) + '\n'

    @staticmethod
    def split_content(content: str) -> List[str]:
        """
        Split file content into lines the way a diff would show them.

        A final newline terminates the last line rather than starting a new,
        empty one, and carriage returns before newlines are dropped.

        Args:
            content: Text content

        Returns:
            List of lines without line terminators
        """
        if not content:
            return []

        lines = content.split('\n')
        if content.endswith('\n'):
            lines.pop()

        return [line[:-1] if line.endswith('\r') else line for line in lines]
