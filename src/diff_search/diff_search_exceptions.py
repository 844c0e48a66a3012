"""Custom exceptions for diff search operations."""

from typing import Any


class DiffSearchError(Exception):
    """Base exception for diff search operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class ToolUnavailableError(DiffSearchError):
    """Raised when the external diff tool cannot be invoked at all."""


class WorkspaceError(DiffSearchError):
    """Raised when the workspace root directory is missing."""


class UnreadableFileError(DiffSearchError):
    """Raised when an untracked file cannot be read as text."""


class InvalidPatternError(DiffSearchError):
    """Raised when a regular expression query fails to compile."""
