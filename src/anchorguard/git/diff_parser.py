"""Unified diff parser — finds deleted Markdown headings.

Line numbers are reported in the *new* file's coordinate space: context and
added lines advance the counter, removed lines never do. A heading deleted
right after the hunk's first context line of ``@@ -1,3 +1,3 @@`` is
therefore reported at line 2.
"""

from __future__ import annotations

import re
from typing import Generator, List, Optional, Tuple

from anchorguard.git.models import HeadingChange, LineType, UnifiedDiffHunk

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git ")
_HUNK_MARKER = "@@"
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file")
_FILE_HEADER_OLD = re.compile(r"^--- (?:a/|/dev/null)")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (?:b/|/dev/null)")
_ATX_HEADING_RE = re.compile(r"^#{1,6}\s")


def parse_hunk_header(header: str) -> Tuple[int, int, int, int]:
    """Return ``(old_start, old_count, new_start, new_count)``.

    Omitted counts mean 1. A header that does not parse yields all zeros.
    """
    m = _HUNK_HEADER_RE.match(header)
    if m is None:
        return 0, 0, 0, 0
    old_start = int(m.group(1))
    old_count = int(m.group(2)) if m.group(2) is not None else 1
    new_start = int(m.group(3))
    new_count = int(m.group(4)) if m.group(4) is not None else 1
    return old_start, old_count, new_start, new_count


def classify(line: str, *, file_headers: bool = True) -> Optional[LineType]:
    """Classify a hunk body line. ``None`` means it carries no content.

    With *file_headers* off, ``--- a/...`` and ``+++ b/...`` count as an
    ordinary removal and addition.
    """
    if file_headers and (_FILE_HEADER_OLD.match(line) or _FILE_HEADER_NEW.match(line)):
        return None
    if _NO_NEWLINE_RE.match(line):
        return None
    if line.startswith("-"):
        return LineType.REMOVED
    if line.startswith("+"):
        return LineType.ADDED
    # Some tools strip the single space off blank context lines
    if line.startswith(" ") or line == "":
        return LineType.CONTEXT
    return None


class DiffParser:
    """Parse the unified diff of one file.

    A hunk whose header parses holds exactly the lines its counts declare;
    anything after that, up to the next ``@@``, is outside the hunk. A hunk
    with a malformed header runs until the next ``@@`` or ``diff --git``.

    Usage::

        parser = DiffParser(diff_text)
        for change in parser.heading_changes():
            print(change.line, change.heading)
    """

    def __init__(self, diff_text: Optional[str]) -> None:
        self._lines = (diff_text or "").splitlines()

    def hunks(self) -> Generator[UnifiedDiffHunk, None, None]:
        """Yield every hunk in order."""
        header: Optional[str] = None
        body: List[str] = []
        bounded = False
        old_left = new_left = 0

        for raw_line in self._lines:
            line = raw_line.rstrip("\r")

            if (
                header is not None
                and bounded
                and old_left <= 0
                and new_left <= 0
                and not _NO_NEWLINE_RE.match(line)
            ):
                yield self._build_hunk(header, body, bounded)
                header = None
                body = []

            if line.startswith(_HUNK_MARKER):
                if header is not None:
                    yield self._build_hunk(header, body, bounded)
                header = line
                body = []
                bounded = _HUNK_HEADER_RE.match(line) is not None
                _, old_left, _, new_left = parse_hunk_header(line)
                continue
            if _DIFF_HEADER_RE.match(line):
                # next file in a multi-file diff closes the hunk
                if header is not None:
                    yield self._build_hunk(header, body, bounded)
                header = None
                body = []
                continue
            if header is None:
                continue

            if bounded:
                kind = classify(line, file_headers=False)
                if kind in (LineType.REMOVED, LineType.CONTEXT):
                    old_left -= 1
                if kind in (LineType.ADDED, LineType.CONTEXT):
                    new_left -= 1
            body.append(line)

        if header is not None:
            yield self._build_hunk(header, body, bounded)

    def heading_changes(self) -> Generator[HeadingChange, None, None]:
        """Yield a HeadingChange for every deleted ATX heading."""
        for hunk in self.hunks():
            line_no = hunk.new_start
            hunk_text = hunk.text
            for line in hunk.lines:
                kind = classify(line, file_headers=not hunk.bounded)
                if kind is None:
                    continue
                if kind == LineType.REMOVED:
                    if _ATX_HEADING_RE.match(line[1:]):
                        yield HeadingChange(line=line_no, content=line, hunk=hunk_text)
                    continue
                line_no += 1

    @staticmethod
    def _build_hunk(header: str, body: List[str], bounded: bool) -> UnifiedDiffHunk:
        old_start, old_count, new_start, new_count = parse_hunk_header(header)
        return UnifiedDiffHunk(
            header=header,
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
            lines=tuple(body),
            bounded=bounded,
        )


def extract_heading_changes(diff_text: Optional[str]) -> List[HeadingChange]:
    """Return the deleted headings of *diff_text*, in diff order."""
    return list(DiffParser(diff_text).heading_changes())
