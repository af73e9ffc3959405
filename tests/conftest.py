"""Shared test fixtures — sample diffs, fakes, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from anchorguard.api.client import GitHubError, PullRequestInfo, ReviewComment
from anchorguard.git.adapter import filter_paths


@pytest.fixture
def sample_diff_renamed_heading() -> str:
    """A one-hunk diff where a second-level heading is renamed."""
    return textwrap.dedent("""\
        diff --git a/docs/guide.md b/docs/guide.md
        index 1234567..89abcde 100644
        --- a/docs/guide.md
        +++ b/docs/guide.md
        @@ -1,3 +1,3 @@
         # Intro
        -## Old Section
        +## New Section
         more text
    """)


@pytest.fixture
def sample_diff_two_hunks() -> str:
    """Two hunks, each removing a heading."""
    return textwrap.dedent("""\
        diff --git a/docs/guide.md b/docs/guide.md
        index 1234567..89abcde 100644
        --- a/docs/guide.md
        +++ b/docs/guide.md
        @@ -1,4 +1,4 @@
         # Title
         intro
        -## Setup
        +## Installation
         text
        @@ -20,3 +20,3 @@
         context
        +added
        -### Usage
         tail
    """)


@pytest.fixture
def sample_diff_text_only() -> str:
    """Deletions and additions, but no heading removed."""
    return textwrap.dedent("""\
        diff --git a/docs/faq.md b/docs/faq.md
        index 1234567..89abcde 100644
        --- a/docs/faq.md
        +++ b/docs/faq.md
        @@ -5,3 +5,3 @@
         # FAQ
        -Some text
        +## New Title
         more
    """)


@pytest.fixture
def sample_diff_deleted_file() -> str:
    """A documentation file removed entirely."""
    return textwrap.dedent("""\
        diff --git a/docs/old.md b/docs/old.md
        deleted file mode 100644
        index abc1234..0000000
        --- a/docs/old.md
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -# Old Page
        -body
        -## Details
    """)


class FakeDiffProvider:
    """In-memory DiffProvider: path -> diff text."""

    def __init__(self, diffs: Dict[str, str]) -> None:
        self.diffs = diffs
        self.requested: List[str] = []

    def list_changed_files(self, prefix="", extensions=()):
        return filter_paths(self.diffs, prefix, extensions)

    def get_file_diff(self, path):
        self.requested.append(path)
        return self.diffs[path]


class FakeClient:
    """Records API calls instead of making them."""

    def __init__(
        self,
        existing: Optional[List[ReviewComment]] = None,
        head_sha: str = "abc123",
        fail_paths: tuple = (),
        fail_lookup: bool = False,
    ) -> None:
        self.existing = list(existing or [])
        self.head_sha = head_sha
        self.fail_paths = set(fail_paths)
        self.fail_lookup = fail_lookup
        self.comments: List[dict] = []
        self.reviews: List[dict] = []

    def get_pull_request(self, number):
        if self.fail_lookup:
            raise GitHubError("Not Found", status=404, url=f"https://api.github.com/repos/o/r/pulls/{number}")
        return PullRequestInfo(number=number, head_sha=self.head_sha)

    def list_review_comments(self, number):
        return list(self.existing)

    def create_review_comment(self, number, commit_id, path, line, body, side="RIGHT"):
        if path in self.fail_paths:
            raise GitHubError("Validation Failed", status=422, url="https://api.github.com/repos/o/r/pulls/1/comments")
        self.comments.append(
            {"number": number, "commit_id": commit_id, "path": path, "line": line, "body": body, "side": side}
        )

    def create_review(self, number, commit_id, comments, body=""):
        if any(c["path"] in self.fail_paths for c in comments):
            raise GitHubError("Forbidden", status=403, url="https://api.github.com/repos/o/r/pulls/1/reviews")
        self.reviews.append({"number": number, "commit_id": commit_id, "comments": comments})

    @property
    def call_count(self) -> int:
        return len(self.comments) + len(self.reviews)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    return tmp_path


@pytest.fixture
def docs_repo(tmp_git_repo: Path) -> Path:
    """A repo whose last commit renames a heading in docs/guide.md."""
    docs = tmp_git_repo / "docs"
    docs.mkdir()
    guide = docs / "guide.md"
    guide.write_text("# Guide\n\n## Install\n\nRun it.\n")
    (tmp_git_repo / "notes.txt").write_text("## not markdown\n")
    _git(tmp_git_repo, "add", ".")
    _git(tmp_git_repo, "commit", "-m", "add docs")

    guide.write_text("# Guide\n\n## Installation\n\nRun it.\n")
    (tmp_git_repo / "notes.txt").write_text("changed\n")
    _git(tmp_git_repo, "add", ".")
    _git(tmp_git_repo, "commit", "-m", "rename heading")
    return tmp_git_repo
