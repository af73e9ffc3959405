"""Review comment construction, de-duplication, and posting.

Every failed API call is reported and recorded, then skipped; nothing is
retried and one failure never stops the remaining comments.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from rich.console import Console

from anchorguard.api.client import GitHubClient, GitHubError, ReviewComment
from anchorguard.config.loader import resolve_search_path
from anchorguard.config.schema import AnchorGuardConfig
from anchorguard.git.models import HeadingChange
from anchorguard.review.models import PostOutcome

COMMENT_PREFIX = "\U0001f916 Beep boop!"


def build_body(
    changes: Sequence[HeadingChange],
    *,
    marker: str,
    message: str,
    search_path: str = "docs",
    include_heading: bool = True,
) -> str:
    """Return the comment body: marker line, instruction, optional headings."""
    parts = [f"{COMMENT_PREFIX} {marker}", message.format(search_path=search_path)]
    if include_heading:
        headings = [c.heading for c in changes if c.heading]
        if len(headings) == 1:
            parts.append(f"Removed heading: `{headings[0]}`")
        elif headings:
            parts.append("Removed headings:\n" + "\n".join(f"- `{h}`" for h in headings))
    return "\n\n".join(parts)


def is_duplicate(path: str, line: int, comments: Sequence[ReviewComment], marker: str) -> bool:
    """Return True if a marker comment already sits on *path* at *line*.

    Only new-file line numbers are compared. ``original_line`` stands in for
    ``line`` once a comment is outdated; ``position`` counts from the top of
    the patch and is used only when a comment carries neither.
    """
    for comment in comments:
        if comment.path != path or marker not in comment.body:
            continue
        if comment.line is not None:
            anchor = comment.line
        elif comment.original_line is not None:
            anchor = comment.original_line
        else:
            anchor = comment.position
        if anchor == line:
            return True
    return False


def group_by_line(changes: Sequence[HeadingChange]) -> Dict[int, List[HeadingChange]]:
    """Group changes sharing a line; consecutive deletions land on the same one."""
    groups: Dict[int, List[HeadingChange]] = {}
    for change in changes:
        groups.setdefault(change.line, []).append(change)
    return groups


class CommentPoster:
    """Posts heading-change warnings for one pull request."""

    def __init__(
        self,
        client: GitHubClient,
        pr_number: int,
        commit_id: str,
        config: AnchorGuardConfig,
        existing: Optional[List[ReviewComment]] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.client = client
        self.pr_number = pr_number
        self.commit_id = commit_id
        self.config = config
        self.existing: List[ReviewComment] = list(existing or [])
        self.console = console or Console(stderr=True)
        self._search_path = resolve_search_path(config)

    def body_for(self, changes: Sequence[HeadingChange]) -> str:
        c = self.config.comment
        return build_body(
            changes,
            marker=c.marker,
            message=c.message,
            search_path=self._search_path,
            include_heading=c.include_heading,
        )

    def post_file(self, path: str, changes: Sequence[HeadingChange]) -> List[PostOutcome]:
        """Post the warnings for *path*, skipping those already present."""
        outcomes: List[PostOutcome] = []
        pending: Dict[int, List[HeadingChange]] = {}
        marker = self.config.comment.marker

        for line, group in group_by_line(changes).items():
            if line <= 0:
                # malformed hunk header, nothing to anchor to
                outcomes.extend(_outcomes(path, group, "skipped", "no line position"))
                continue
            if is_duplicate(path, line, self.existing, marker):
                self.console.print(f"[dim]Comment already exists for {path}:{line}[/dim]")
                outcomes.extend(_outcomes(path, group, "duplicate"))
                continue
            pending[line] = group

        if not pending:
            return outcomes

        if self.config.comment.mode == "review":
            outcomes.extend(self._post_review(path, pending))
        else:
            for line, group in pending.items():
                outcomes.extend(self._post_comment(path, line, group))
        return outcomes

    # -- internals -----------------------------------------------------------

    def _remember(self, path: str, line: int, body: str) -> None:
        self.existing.append(ReviewComment(path=path, body=body, line=line))

    def _report_failure(self, where: str, exc: GitHubError) -> None:
        self.console.print(f"[bold red]Failed to comment on {where}:[/bold red] {exc.describe()}")

    def _post_comment(self, path: str, line: int, group: List[HeadingChange]) -> List[PostOutcome]:
        body = self.body_for(group)
        try:
            self.client.create_review_comment(
                self.pr_number,
                self.commit_id,
                path,
                line,
                body,
                side=self.config.comment.side,
            )
        except GitHubError as exc:
            self._report_failure(f"{path}:{line}", exc)
            return _outcomes(path, group, "failed", exc.describe())
        self._remember(path, line, body)
        self.console.print(f"Left comment on {path}:{line}")
        return _outcomes(path, group, "posted")

    def _post_review(self, path: str, pending: Dict[int, List[HeadingChange]]) -> List[PostOutcome]:
        bodies = {line: self.body_for(group) for line, group in pending.items()}
        comments = [
            {"path": path, "line": line, "side": self.config.comment.side, "body": body}
            for line, body in bodies.items()
        ]
        all_changes = [c for group in pending.values() for c in group]
        try:
            self.client.create_review(self.pr_number, self.commit_id, comments)
        except GitHubError as exc:
            self._report_failure(path, exc)
            return _outcomes(path, all_changes, "failed", exc.describe())
        for line, body in bodies.items():
            self._remember(path, line, body)
        lines = ", ".join(str(line) for line in pending)
        self.console.print(f"Left review on {path} (lines {lines})")
        return _outcomes(path, all_changes, "posted")


def _outcomes(path: str, changes: Sequence[HeadingChange], status, detail: Optional[str] = None) -> List[PostOutcome]:
    return [PostOutcome(path, c.line, c.heading, status, detail) for c in changes]
