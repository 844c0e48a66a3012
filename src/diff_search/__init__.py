"""
Search over uncommitted changes.

This package collects unstaged, staged and untracked changes from a git
working tree as unified diff text, parses them into per-line records and
searches those records.
"""

from diff_search.diff_search_aggregator import DiffSourceAggregator
from diff_search.diff_search_engine import DiffSearchEngine
from diff_search.diff_search_exceptions import (
    DiffSearchError,
    InvalidPatternError,
    ToolUnavailableError,
    UnreadableFileError,
    WorkspaceError,
)
from diff_search.diff_search_hasher import content_fingerprint
from diff_search.diff_search_matcher import DiffSearchMatcher
from diff_search.diff_search_open_target import FileRevision, OpenTarget, open_target_for
from diff_search.diff_search_parser import DiffSearchParser
from diff_search.diff_search_provider import DiffSourceProvider, GitDiffSourceProvider
from diff_search.diff_search_settings import DiffSearchSettings
from diff_search.diff_search_synthesizer import UntrackedDiffSynthesizer
from diff_search.diff_search_types import (
    SECTION_MARKERS,
    ChangeSource,
    LineKind,
    LineRecord,
    SearchOptions,
    SearchScope,
)

__all__ = [
    # Exceptions
    'DiffSearchError',
    'ToolUnavailableError',
    'WorkspaceError',
    'UnreadableFileError',
    'InvalidPatternError',
    # Types
    'ChangeSource',
    'LineKind',
    'LineRecord',
    'SearchOptions',
    'SearchScope',
    'SECTION_MARKERS',
    'FileRevision',
    'OpenTarget',
    # Core classes
    'content_fingerprint',
    'UntrackedDiffSynthesizer',
    'DiffSourceProvider',
    'GitDiffSourceProvider',
    'DiffSourceAggregator',
    'DiffSearchParser',
    'DiffSearchMatcher',
    'open_target_for',
    'DiffSearchEngine',
    'DiffSearchSettings',
]
