"""Tests for the git-backed diff source provider."""

import asyncio
import shutil
import subprocess
import sys

import pytest

from diff_search.diff_search_exceptions import (
    ToolUnavailableError,
    UnreadableFileError,
    WorkspaceError,
)
from diff_search.diff_search_provider import DEFAULT_MAX_FILE_SIZE, GitDiffSourceProvider


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo, *args):
    """Run a git command in a test repository."""
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=repo,
        check=True,
        capture_output=True
    )


@pytest.fixture
def repo(tmp_path):
    """Create a repository with one committed file."""
    git(tmp_path, "init", "-q")
    (tmp_path / "tracked.txt").write_text("line one\nline two\nline three\n", encoding="utf-8")
    git(tmp_path, "add", "tracked.txt")
    git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


class TestGitDiffSourceProviderFiles:
    """Test reading untracked files."""

    def test_read_text_file(self, tmp_path):
        """Test reading a small text file."""
        (tmp_path / "a.txt").write_text("hello\n", encoding="utf-8")
        provider = GitDiffSourceProvider(tmp_path)

        assert asyncio.run(provider.read_text_file("a.txt")) == "hello\n"

    def test_read_keeps_crlf(self, tmp_path):
        """Test that line endings are returned untranslated."""
        (tmp_path / "a.txt").write_bytes(b"one\r\ntwo\r\n")
        provider = GitDiffSourceProvider(tmp_path)

        assert asyncio.run(provider.read_text_file("a.txt")) == "one\r\ntwo\r\n"

    def test_missing_file(self, tmp_path):
        """Test that a missing file is unreadable."""
        provider = GitDiffSourceProvider(tmp_path)

        with pytest.raises(UnreadableFileError):
            asyncio.run(provider.read_text_file("missing.txt"))

    def test_directory_is_not_a_file(self, tmp_path):
        """Test that directories are unreadable."""
        (tmp_path / "subdir").mkdir()
        provider = GitDiffSourceProvider(tmp_path)

        with pytest.raises(UnreadableFileError):
            asyncio.run(provider.read_text_file("subdir"))

    def test_file_at_size_limit_is_rejected(self, tmp_path):
        """Test that files must be strictly smaller than the limit."""
        (tmp_path / "big.txt").write_text("x" * 10, encoding="utf-8")
        provider = GitDiffSourceProvider(tmp_path, max_file_size=10)

        with pytest.raises(UnreadableFileError) as exc_info:
            asyncio.run(provider.read_text_file("big.txt"))

        assert exc_info.value.error_details['size'] == 10

    def test_file_below_size_limit_is_read(self, tmp_path):
        """Test that a file one byte under the limit is accepted."""
        (tmp_path / "ok.txt").write_text("x" * 9, encoding="utf-8")
        provider = GitDiffSourceProvider(tmp_path, max_file_size=10)

        assert asyncio.run(provider.read_text_file("ok.txt")) == "x" * 9

    def test_default_limit_is_one_mebibyte(self):
        """Test the default size limit."""
        assert DEFAULT_MAX_FILE_SIZE == 1024 * 1024

    def test_invalid_utf8_is_rejected(self, tmp_path):
        """Test that undecodable files are unreadable."""
        (tmp_path / "latin.txt").write_bytes(b"caf\xe9\n")
        provider = GitDiffSourceProvider(tmp_path)

        with pytest.raises(UnreadableFileError):
            asyncio.run(provider.read_text_file("latin.txt"))

    def test_binary_content_is_rejected(self, tmp_path):
        """Test that files containing NUL bytes are treated as binary."""
        (tmp_path / "data.bin").write_bytes(b"\x00\x01\x02")
        provider = GitDiffSourceProvider(tmp_path)

        with pytest.raises(UnreadableFileError):
            asyncio.run(provider.read_text_file("data.bin"))

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_outside_root_is_rejected(self, tmp_path):
        """Test that a symlink is not followed to a file outside the root."""
        root = tmp_path / "repo"
        root.mkdir()
        (tmp_path / "outside").mkdir()
        (tmp_path / "outside" / "secret.txt").write_text("TOP SECRET\n", encoding="utf-8")
        (root / "link.txt").symlink_to(tmp_path / "outside" / "secret.txt")
        provider = GitDiffSourceProvider(root)

        with pytest.raises(UnreadableFileError) as exc_info:
            asyncio.run(provider.read_text_file("link.txt"))

        assert "SECRET" not in str(exc_info.value)

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_inside_root_is_rejected(self, tmp_path):
        """Test that symlinks are never read, even to files within the root."""
        (tmp_path / "real.txt").write_text("real\n", encoding="utf-8")
        (tmp_path / "alias.txt").symlink_to(tmp_path / "real.txt")
        provider = GitDiffSourceProvider(tmp_path)

        with pytest.raises(UnreadableFileError):
            asyncio.run(provider.read_text_file("alias.txt"))

    def test_path_escaping_root_is_rejected(self, tmp_path):
        """Test that a relative path leading out of the root is refused."""
        root = tmp_path / "repo"
        root.mkdir()
        (tmp_path / "secret.txt").write_text("TOP SECRET\n", encoding="utf-8")
        provider = GitDiffSourceProvider(root)

        with pytest.raises(UnreadableFileError) as exc_info:
            asyncio.run(provider.read_text_file("../secret.txt"))

        assert "outside the workspace" in str(exc_info.value)


class TestGitDiffSourceProviderErrors:
    """Test failures to run git."""

    def test_missing_git_executable(self, tmp_path):
        """Test that an unknown executable is reported as tool unavailable."""
        provider = GitDiffSourceProvider(tmp_path, git_command="definitely-not-a-real-git-binary")

        with pytest.raises(ToolUnavailableError) as exc_info:
            asyncio.run(provider.working_diff())

        assert exc_info.value.error_details['command'] == "definitely-not-a-real-git-binary"

    def test_missing_workspace(self, tmp_path):
        """Test that a missing root directory is reported as a workspace error."""
        provider = GitDiffSourceProvider(tmp_path / "nowhere")

        with pytest.raises(WorkspaceError):
            asyncio.run(provider.staged_diff())

    @requires_git
    def test_not_a_repository_means_no_changes(self, tmp_path):
        """Test that git failing outside a repository yields empty results."""
        provider = GitDiffSourceProvider(tmp_path)

        assert asyncio.run(provider.working_diff()) == ""
        assert asyncio.run(provider.staged_diff()) == ""
        assert asyncio.run(provider.untracked_files()) == []


@requires_git
class TestGitDiffSourceProviderRepository:
    """Test against a real git repository."""

    def test_clean_repository(self, repo):
        """Test that a clean repository reports nothing."""
        provider = GitDiffSourceProvider(repo)

        assert asyncio.run(provider.working_diff()) == ""
        assert asyncio.run(provider.staged_diff()) == ""
        assert asyncio.run(provider.untracked_files()) == []

    def test_working_diff(self, repo):
        """Test that unstaged edits appear in the working diff only."""
        (repo / "tracked.txt").write_text("line one\nline 2\nline three\n", encoding="utf-8")
        provider = GitDiffSourceProvider(repo)

        working = asyncio.run(provider.working_diff())
        assert "diff --git a/tracked.txt b/tracked.txt" in working
        assert "+line 2" in working
        assert asyncio.run(provider.staged_diff()) == ""

    def test_staged_diff(self, repo):
        """Test that staged edits appear in the staged diff only."""
        (repo / "tracked.txt").write_text("line one\nline two\nline three\nline four\n", encoding="utf-8")
        git(repo, "add", "tracked.txt")
        provider = GitDiffSourceProvider(repo)

        assert "+line four" in asyncio.run(provider.staged_diff())
        assert asyncio.run(provider.working_diff()) == ""

    def test_untracked_files(self, repo):
        """Test listing untracked files, including unusual names."""
        (repo / "new.txt").write_text("new\n", encoding="utf-8")
        (repo / "sub").mkdir()
        (repo / "sub" / "café notes.md").write_text("x\n", encoding="utf-8")
        (repo / ".gitignore").write_text("ignored.log\n", encoding="utf-8")
        (repo / "ignored.log").write_text("noise\n", encoding="utf-8")
        provider = GitDiffSourceProvider(repo)

        files = asyncio.run(provider.untracked_files())
        assert sorted(files) == [".gitignore", "new.txt", "sub/café notes.md"]
