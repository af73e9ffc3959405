"""Git interface layer — adapter, diff parsing, models."""

from anchorguard.git.adapter import (
    DiffProvider,
    GitDiffProvider,
    GitError,
    filter_paths,
    get_repo_root,
)
from anchorguard.git.diff_parser import DiffParser, extract_heading_changes, parse_hunk_header
from anchorguard.git.models import HeadingChange, LineType, UnifiedDiffHunk

__all__ = [
    "DiffParser",
    "DiffProvider",
    "GitDiffProvider",
    "GitError",
    "HeadingChange",
    "LineType",
    "UnifiedDiffHunk",
    "extract_heading_changes",
    "filter_paths",
    "get_repo_root",
    "parse_hunk_header",
]
