"""Data models for diff parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

_ATX_PREFIX_RE = re.compile(r"^(#{1,6})\s+")


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True)
class UnifiedDiffHunk:
    """One ``@@`` block of a unified diff."""

    header: str
    old_start: int = 0
    old_count: int = 0
    new_start: int = 0
    new_count: int = 0
    lines: Tuple[str, ...] = ()
    bounded: bool = True  # False when the header could not be parsed

    @property
    def text(self) -> str:
        return "\n".join((self.header, *self.lines))


@dataclass(frozen=True)
class HeadingChange:
    """A deleted ATX heading, positioned by new-file line number."""

    line: int
    content: str  # raw diff line, leading '-' included
    hunk: Optional[str] = None

    @property
    def heading(self) -> str:
        return self.content[1:].strip()

    @property
    def level(self) -> int:
        m = _ATX_PREFIX_RE.match(self.heading)
        return len(m.group(1)) if m else 0
