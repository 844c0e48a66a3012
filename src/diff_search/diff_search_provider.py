"""Sources of raw diff text and untracked file content."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from diff_search.diff_search_exceptions import (
    ToolUnavailableError,
    UnreadableFileError,
    WorkspaceError,
)


DEFAULT_MAX_FILE_SIZE = 1024 * 1024


class DiffSourceProvider(ABC):
    """Abstract base class for anything that can report uncommitted changes."""

    @abstractmethod
    async def working_diff(self) -> str:
        """
        Get the unified diff of the working tree against the index.

        Returns:
            Unified diff text, or an empty string if there is nothing to report
        """

    @abstractmethod
    async def staged_diff(self) -> str:
        """
        Get the unified diff of the index against the last commit.

        Returns:
            Unified diff text, or an empty string if there is nothing to report
        """

    @abstractmethod
    async def untracked_files(self) -> List[str]:
        """
        List files that are present on disk but not tracked.

        Returns:
            Repository-relative paths using forward slashes
        """

    @abstractmethod
    async def read_text_file(self, path: str) -> str:
        """
        Read the content of an untracked file.

        Args:
            path: Repository-relative path as returned by `untracked_files`

        Returns:
            File content

        Raises:
            UnreadableFileError: If the file is missing, too large, or not text
        """


class GitDiffSourceProvider(DiffSourceProvider):
    """Reports uncommitted changes by running the git command-line tool."""

    def __init__(
        self,
        root: Path,
        git_command: str = "git",
        max_file_size: int = DEFAULT_MAX_FILE_SIZE
    ):
        """
        Initialize the provider.

        Args:
            root: Root directory of the repository working tree
            git_command: Name or path of the git executable
            max_file_size: Untracked files must be strictly smaller than this many bytes
        """
        self._root = Path(root)
        self._git_command = git_command
        self._max_file_size = max_file_size
        self._logger = logging.getLogger("GitDiffSourceProvider")

    @property
    def root(self) -> Path:
        """Get the repository root directory."""
        return self._root

    async def working_diff(self) -> str:
        return await self._run_git_diff([])

    async def staged_diff(self) -> str:
        return await self._run_git_diff(["--cached"])

    async def untracked_files(self) -> List[str]:
        returncode, stdout, stderr = await self._run_git(
            ["ls-files", "--others", "--exclude-standard", "-z"]
        )
        if returncode != 0:
            self._logger.warning("git ls-files exited with status %d: %s", returncode, stderr.strip())
            return []

        return [path for path in stdout.split('\0') if path.strip()]

    async def read_text_file(self, path: str) -> str:
        return await asyncio.to_thread(self._read_text_file, path)

    def _read_text_file(self, path: str) -> str:
        """Read a file below the root, enforcing the size and text limits."""
        file_path = self._root / path

        try:
            # Symlinks are not followed, whether or not they point inside the root
            if file_path.is_symlink() or not file_path.is_file():
                raise UnreadableFileError(f"Not a regular file: {path}", {'path': path})

            try:
                file_path.resolve().relative_to(self._root.resolve())

            except ValueError as e:
                raise UnreadableFileError(f"File is outside the workspace: {path}", {'path': path}) from e

            file_size = file_path.stat().st_size
            if file_size >= self._max_file_size:
                raise UnreadableFileError(
                    f"File too large: {path} ({file_size:,} bytes)",
                    {'path': path, 'size': file_size, 'max_size': self._max_file_size}
                )

            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()

        except UnicodeDecodeError as e:
            raise UnreadableFileError(f"File is not UTF-8 text: {path}", {'path': path}) from e

        except OSError as e:
            raise UnreadableFileError(f"Failed to read file {path}: {str(e)}", {'path': path}) from e

        if '\0' in content:
            raise UnreadableFileError(f"File looks binary: {path}", {'path': path})

        return content

    async def _run_git_diff(self, extra_args: List[str]) -> str:
        """
        Run `git diff` with some extra arguments.

        A non-zero exit status means there is nothing usable to report, so it
        produces an empty string rather than an error.
        """
        args = ["diff", "--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/", *extra_args]
        returncode, stdout, stderr = await self._run_git(args)
        if returncode != 0:
            self._logger.warning(
                "git %s exited with status %d: %s", ' '.join(args), returncode, stderr.strip()
            )
            return ""

        if stderr.strip():
            self._logger.debug("git %s stderr: %s", ' '.join(args), stderr.strip())

        return stdout

    async def _run_git(self, args: List[str]) -> tuple[int, str, str]:
        """
        Run git in the repository root.

        Args:
            args: Arguments following the git executable

        Returns:
            Tuple of (exit status, stdout, stderr)

        Raises:
            WorkspaceError: If the root directory does not exist
            ToolUnavailableError: If git cannot be started
        """
        if not self._root.is_dir():
            raise WorkspaceError(f"Workspace directory does not exist: {self._root}", {'root': str(self._root)})

        command = [self._git_command, "-c", "core.quotepath=false", *args]
        self._logger.debug("Running %s in %s", ' '.join(command), self._root)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=self._root,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )

        except OSError as e:
            raise ToolUnavailableError(
                f"Unable to run '{self._git_command}': {str(e)}. Is git installed and on the PATH?",
                {'command': self._git_command}
            ) from e

        stdout, stderr = await process.communicate()
        assert process.returncode is not None
        return (
            process.returncode,
            stdout.decode('utf-8', errors='replace'),
            stderr.decode('utf-8', errors='replace')
        )
