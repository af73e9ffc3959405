"""Heading-change review pipeline."""

from anchorguard.review.engine import ReviewError, collect, run
from anchorguard.review.models import FileChanges, PostOutcome, RunResult
from anchorguard.review.poster import CommentPoster, build_body, is_duplicate

__all__ = [
    "CommentPoster",
    "FileChanges",
    "PostOutcome",
    "ReviewError",
    "RunResult",
    "build_body",
    "collect",
    "is_duplicate",
    "run",
]
