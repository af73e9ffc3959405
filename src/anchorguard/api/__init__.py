"""GitHub pull-request API client."""

from anchorguard.api.client import (
    GitHubClient,
    GitHubError,
    PullRequestInfo,
    ReviewComment,
    parse_repository,
)

__all__ = [
    "GitHubClient",
    "GitHubError",
    "PullRequestInfo",
    "ReviewComment",
    "parse_repository",
]
