"""Git subprocess wrapper — changed files and per-file diffs for a ref range."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class DiffProvider(Protocol):
    """Source of changed files and their unified diffs."""

    def list_changed_files(self, prefix: str = "", extensions: Sequence[str] = ()) -> List[str]:
        ...

    def get_file_diff(self, path: str) -> str:
        ...


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        # Empty diff is not an error
        if not stderr or "fatal" not in stderr.lower():
            return result.stdout
        raise GitError(f"git error: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def filter_paths(paths: Iterable[str], prefix: str = "", extensions: Sequence[str] = ()) -> List[str]:
    """Keep paths under *prefix* whose suffix is one of *extensions* (any, if empty)."""
    exts = tuple(e.lower() for e in extensions)
    kept = []
    for path in paths:
        if prefix and not path.startswith(prefix):
            continue
        if exts and not path.lower().endswith(exts):
            continue
        kept.append(path)
    return kept


class GitDiffProvider:
    """DiffProvider backed by ``git diff <base>...<head>``.

    The three-dot range diffs against the merge base, which is what a pull
    request shows.
    """

    def __init__(self, repo_root: Path, base_ref: str, head_ref: str = "HEAD") -> None:
        self.repo_root = repo_root
        self.base_ref = base_ref
        self.head_ref = head_ref

    @property
    def range(self) -> str:
        return f"{self.base_ref}...{self.head_ref}"

    def list_changed_files(self, prefix: str = "", extensions: Sequence[str] = ()) -> List[str]:
        output = _run_git(
            ["diff", "--name-only", "--no-color", self.range],
            cwd=self.repo_root,
        )
        names = [line.strip() for line in output.splitlines() if line.strip()]
        return filter_paths(names, prefix, extensions)

    def get_file_diff(self, path: str) -> str:
        return _run_git(
            ["diff", "--no-color", self.range, "--", path],
            cwd=self.repo_root,
        )
