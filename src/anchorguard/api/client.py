"""Thin PyGithub wrapper for pull-request metadata and review comments.

Only the calls the reviewer needs are exposed, with plain dataclasses in and
out, so the rest of the package never touches PyGithub objects directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from github import Auth, Github, GithubException

DEFAULT_API_URL = "https://api.github.com"


class GitHubError(Exception):
    """Raised when a GitHub API call fails (HTTP error or transport failure)."""

    def __init__(self, message: str, *, status: Optional[int] = None,
                 url: Optional[str] = None, detail: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url
        self.detail = detail

    def describe(self) -> str:
        parts = [str(self)]
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.detail:
            parts.append(f"detail={self.detail}")
        return " ".join(parts)


@dataclass(frozen=True)
class PullRequestInfo:
    number: int
    head_sha: str


@dataclass(frozen=True)
class ReviewComment:
    """The fields of an existing review comment used for de-duplication."""

    path: str
    body: str
    line: Optional[int] = None
    original_line: Optional[int] = None
    position: Optional[int] = None


def parse_repository(repository: Optional[str]) -> tuple[str, str]:
    """Split ``owner/name``. Raises GitHubError on anything else."""
    parts = (repository or "").strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise GitHubError(f"Invalid repository identifier: {repository!r} (expected owner/name)")
    return parts[0], parts[1]


class GitHubClient:
    """Pull-request client for one repository.

    *gh* lets callers supply a preconfigured ``github.Github`` instance.
    """

    def __init__(
        self,
        repository: str,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        *,
        gh: Optional[Github] = None,
    ) -> None:
        owner, name = parse_repository(repository)
        self.repository = f"{owner}/{name}"
        self.api_url = api_url.rstrip("/")
        if gh is None:
            auth = Auth.Token(token) if token else None
            gh = Github(auth=auth, base_url=self.api_url)
        self._gh = gh
        self._repo = None
        self._pulls: Dict[int, Any] = {}
        self._commits: Dict[str, Any] = {}

    # -- helpers -------------------------------------------------------------

    def _url(self, endpoint: str) -> str:
        return f"{self.api_url}/repos/{self.repository}/{endpoint}"

    def _call(self, endpoint: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except GithubException as exc:
            message = exc.data.get("message") if isinstance(exc.data, dict) else None
            raise GitHubError(
                message or "GitHub API request failed",
                status=exc.status,
                url=self._url(endpoint),
                detail=exc.data,
            ) from exc
        except requests.RequestException as exc:
            raise GitHubError(
                f"Network error: {exc}",
                url=self._url(endpoint),
            ) from exc

    def _get_repo(self):
        if self._repo is None:
            self._repo = self._call("", self._gh.get_repo, self.repository)
        return self._repo

    def _get_pull(self, number: int):
        if number not in self._pulls:
            self._pulls[number] = self._call(f"pulls/{number}", self._get_repo().get_pull, number)
        return self._pulls[number]

    def _get_commit(self, sha: str):
        if sha not in self._commits:
            self._commits[sha] = self._call(f"commits/{sha}", self._get_repo().get_commit, sha)
        return self._commits[sha]

    # -- API -----------------------------------------------------------------

    def get_pull_request(self, number: int) -> PullRequestInfo:
        pr = self._get_pull(number)
        return PullRequestInfo(number=number, head_sha=pr.head.sha)

    def list_review_comments(self, number: int) -> List[ReviewComment]:
        pr = self._get_pull(number)

        def _collect() -> List[ReviewComment]:
            return [
                ReviewComment(
                    path=c.path,
                    body=c.body or "",
                    line=c.line,
                    original_line=c.original_line,
                    position=c.position,
                )
                for c in pr.get_review_comments()
            ]

        return self._call(f"pulls/{number}/comments", _collect)

    def create_review_comment(
        self,
        number: int,
        commit_id: str,
        path: str,
        line: int,
        body: str,
        side: str = "RIGHT",
    ) -> None:
        pr = self._get_pull(number)
        commit = self._get_commit(commit_id)
        self._call(
            f"pulls/{number}/comments",
            pr.create_review_comment,
            body,
            commit,
            path,
            line=line,
            side=side,
        )

    def create_review(
        self,
        number: int,
        commit_id: str,
        comments: List[Dict[str, Any]],
        body: str = "",
    ) -> None:
        """Submit one COMMENT review holding *comments* (path/line/side/body dicts)."""
        pr = self._get_pull(number)
        commit = self._get_commit(commit_id)
        self._call(
            f"pulls/{number}/reviews",
            pr.create_review,
            commit=commit,
            body=body,
            event="COMMENT",
            comments=comments,
        )
