"""Load and merge configuration from .anchorguard.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from anchorguard.config.schema import (
    COMMENT_MODES,
    OUTPUT_FORMATS,
    AnchorGuardConfig,
    CommentConfig,
    GitHubConfig,
    OutputConfig,
    ScanConfig,
)

CONFIG_FILENAME = ".anchorguard.toml"

# Checked in order; the second is the name older workflows export.
PR_NUMBER_ENV_VARS = ("ANCHORGUARD_PR_NUMBER", "GITHUB_EVENT_PULL_REQUEST_NUMBER")


class ConfigError(Exception):
    """Raised when config is malformed, unreadable or incomplete."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: AnchorGuardConfig) -> None:
    """Apply GitHub Actions and CI_ANCHORGUARD_* environment overrides."""
    if val := os.environ.get("GITHUB_TOKEN"):
        cfg.github.token = val
    if val := os.environ.get("GITHUB_REPOSITORY"):
        cfg.github.repository = val
    if val := os.environ.get("GITHUB_API_URL"):
        cfg.github.api_url = val
    for name in PR_NUMBER_ENV_VARS:
        if val := os.environ.get(name):
            cfg.github.pr_number = val
            break
    if val := os.environ.get("CI_ANCHORGUARD_BASE_REF"):
        cfg.scan.base_ref = val
    if val := os.environ.get("CI_ANCHORGUARD_HEAD_REF"):
        cfg.scan.head_ref = val
    if val := os.environ.get("CI_ANCHORGUARD_PATH_PREFIX"):
        cfg.scan.path_prefix = val
    if val := os.environ.get("CI_ANCHORGUARD_MODE"):
        if val in COMMENT_MODES:
            cfg.comment.mode = val  # type: ignore[assignment]
    if val := os.environ.get("CI_ANCHORGUARD_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def parse_pr_number(raw: Optional[str]) -> int:
    """Return *raw* as a positive PR number. Raises ConfigError otherwise."""
    if raw is None or not str(raw).strip():
        raise ConfigError("Pull request number is not set")
    try:
        number = int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"Invalid pull request number: {raw!r}") from None
    if number <= 0:
        raise ConfigError(f"Invalid pull request number: {raw!r}")
    return number


def resolve_search_path(cfg: AnchorGuardConfig) -> str:
    """Directory named in the comment's instruction sentence."""
    path = cfg.comment.search_path or cfg.scan.path_prefix or "docs"
    return path.rstrip("/")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> AnchorGuardConfig:
    """Load, validate, and return an AnchorGuardConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = AnchorGuardConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = AnchorGuardConfig(
                version=str(raw.get("version", "1.0")),
                scan=_build_section(raw, ScanConfig, "scan"),
                comment=_build_section(raw, CommentConfig, "comment"),
                github=_build_section(raw, GitHubConfig, "github"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    if cfg.comment.mode not in COMMENT_MODES:
        raise ConfigError(f"Invalid comment mode: {cfg.comment.mode}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format}")
    if cfg.comment.side != "RIGHT":
        raise ConfigError("comment.side must be RIGHT: positions are new-file line numbers")
    if cfg.github.pr_number is not None:
        cfg.github.pr_number = str(cfg.github.pr_number)

    _merge_env_overrides(cfg)
    return cfg
