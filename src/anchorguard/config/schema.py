"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

CommentMode = Literal["review", "comment"]
OutputFormat = Literal["terminal", "json"]

COMMENT_MODES = ("review", "comment")
OUTPUT_FORMATS = ("terminal", "json")

DEFAULT_MARKER = "Heading change detected!"
DEFAULT_MESSAGE = (
    "This means that some anchor links pointing to this heading might be broken now.\n\n"
    "Please search the {search_path} directory for any references to the anchor link "
    "for this content, to avoid broken anchor links."
)


@dataclass
class ScanConfig:
    base_ref: str = "origin/main"
    head_ref: str = "HEAD"
    path_prefix: str = ""  # empty = whole repository
    extensions: List[str] = field(default_factory=lambda: [".md", ".mdx"])


@dataclass
class CommentConfig:
    mode: CommentMode = "review"  # one review per file, or one comment per heading
    side: Literal["RIGHT"] = "RIGHT"  # lines are new-file numbers
    marker: str = DEFAULT_MARKER
    message: str = DEFAULT_MESSAGE
    include_heading: bool = True
    search_path: str = ""  # falls back to scan.path_prefix, then "docs"


@dataclass
class GitHubConfig:
    api_url: str = "https://api.github.com"
    repository: Optional[str] = None  # owner/name
    token: Optional[str] = None
    pr_number: Optional[str] = None  # raw; validated by parse_pr_number()


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class AnchorGuardConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    comment: CommentConfig = field(default_factory=CommentConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
