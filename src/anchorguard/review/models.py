"""Run result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from anchorguard.git.models import HeadingChange

PostStatus = Literal["posted", "duplicate", "failed", "skipped"]


@dataclass
class PostOutcome:
    """What happened to one heading change on the pull request."""

    path: str
    line: int
    heading: str
    status: PostStatus
    detail: Optional[str] = None


@dataclass
class FileChanges:
    path: str
    changes: List[HeadingChange] = field(default_factory=list)


@dataclass
class RunResult:
    """Complete result of one run over a pull request."""

    files_checked: List[str] = field(default_factory=list)
    files: List[FileChanges] = field(default_factory=list)
    outcomes: List[PostOutcome] = field(default_factory=list)
    pr_number: Optional[int] = None
    dry_run: bool = False
    duration_ms: float = 0.0

    @property
    def total_changes(self) -> int:
        return sum(len(f.changes) for f in self.files)

    @property
    def posted(self) -> List[PostOutcome]:
        return [o for o in self.outcomes if o.status == "posted"]

    @property
    def duplicates(self) -> List[PostOutcome]:
        return [o for o in self.outcomes if o.status == "duplicate"]

    @property
    def failed(self) -> List[PostOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]
