"""Review engine — orchestrates the per-pull-request pipeline.

Files are processed one after another: diff, extract, post. The only
network calls made before the loop are one pull-request fetch and one
existing-comments fetch; a failure there aborts the run, a failure while
posting does not.
"""

from __future__ import annotations

import time
from typing import List, Optional

from rich.console import Console

from anchorguard.api.client import GitHubClient, GitHubError
from anchorguard.config.schema import AnchorGuardConfig
from anchorguard.git.adapter import DiffProvider, GitError
from anchorguard.git.diff_parser import extract_heading_changes
from anchorguard.review.models import FileChanges, RunResult
from anchorguard.review.poster import CommentPoster


class ReviewError(Exception):
    """Raised when the run cannot continue (git or pull-request lookup failed)."""


def collect(provider: DiffProvider, config: AnchorGuardConfig) -> List[FileChanges]:
    """Diff every matching changed file and extract its deleted headings."""
    try:
        paths = provider.list_changed_files(config.scan.path_prefix, config.scan.extensions)
        return [FileChanges(path, extract_heading_changes(provider.get_file_diff(path))) for path in paths]
    except GitError as exc:
        raise ReviewError(str(exc)) from exc


def run(
    provider: DiffProvider,
    config: AnchorGuardConfig,
    *,
    client: Optional[GitHubClient] = None,
    pr_number: Optional[int] = None,
    console: Optional[Console] = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> RunResult:
    """Execute the full pipeline. Returns a RunResult."""
    start = time.perf_counter()
    console = console or Console(stderr=True)
    dry_run = dry_run or client is None or pr_number is None
    result = RunResult(pr_number=pr_number, dry_run=dry_run)

    files = collect(provider, config)
    result.files_checked = [f.path for f in files]
    result.files = [f for f in files if f.changes]

    if verbose:
        console.print(f"[dim]Changed files checked: {len(files)}[/dim]")
        console.print(f"[dim]Heading changes: {result.total_changes}[/dim]")

    if not result.files or dry_run or client is None or pr_number is None:
        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return result

    try:
        pr = client.get_pull_request(pr_number)
        existing = client.list_review_comments(pr_number)
    except GitHubError as exc:
        raise ReviewError(f"Cannot load pull request #{pr_number}: {exc.describe()}") from exc

    if verbose:
        console.print(f"[dim]Head commit: {pr.head_sha}[/dim]")
        console.print(f"[dim]Existing review comments: {len(existing)}[/dim]")

    poster = CommentPoster(client, pr_number, pr.head_sha, config, existing, console)
    for file in result.files:
        result.outcomes.extend(poster.post_file(file.path, file.changes))

    result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
    return result
