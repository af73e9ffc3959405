"""anchorguard CLI — Typer application with check, extract, and init commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from anchorguard import __version__

app = typer.Typer(
    name="anchorguard",
    help="Warn on pull requests that remove Markdown headings other pages may link to.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _fail(label: str, exc: object) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=1)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 1 on failure."""
    from anchorguard.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        raise _fail("Error", exc) from exc


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .anchorguard.toml"),
    base: Optional[str] = typer.Option(None, "--base", help="Base ref (default origin/main)"),
    head: Optional[str] = typer.Option(None, "--head", help="Head ref (default HEAD)"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Only check files under this path"),
    pr: Optional[str] = typer.Option(None, "--pr", help="Pull request number"),
    repo: Optional[str] = typer.Option(None, "--repo", help="Repository as owner/name"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Comment mode: review | comment"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report heading changes without commenting"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Check a pull request's documentation diff and comment on removed headings."""
    try:
        _check(config, base, head, prefix, pr, repo, mode, format, dry_run, verbose)
    except typer.Exit:
        raise
    except Exception as exc:
        raise _fail("Unexpected error", exc) from exc


def _check(config, base, head, prefix, pr, repo, mode, format, dry_run, verbose) -> None:
    from anchorguard.config.loader import ConfigError, load_config, parse_pr_number
    from anchorguard.config.schema import COMMENT_MODES, OUTPUT_FORMATS
    from anchorguard.git.adapter import GitDiffProvider
    from anchorguard.output import json_report, terminal
    from anchorguard.review.engine import ReviewError, run

    repo_root = _resolve_repo_root()

    # --- Load config ---
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    # --- CLI overrides ---
    if base:
        cfg.scan.base_ref = base
    if head:
        cfg.scan.head_ref = head
    if prefix is not None:
        cfg.scan.path_prefix = prefix
    if repo:
        cfg.github.repository = repo
    if pr is not None:
        cfg.github.pr_number = pr
    if mode:
        if mode not in COMMENT_MODES:
            raise _fail("Invalid mode", mode)
        cfg.comment.mode = mode  # type: ignore[assignment]
    if format:
        if format not in OUTPUT_FORMATS:
            raise _fail("Invalid format", format)
        cfg.output.format = format  # type: ignore[assignment]

    # --- Pull request input ---
    pr_number: Optional[int] = None
    if not dry_run or cfg.github.pr_number is not None:
        try:
            pr_number = parse_pr_number(cfg.github.pr_number)
        except ConfigError as exc:
            raise _fail("Error", exc) from exc

    client = None
    if not dry_run:
        from anchorguard.api.client import GitHubClient, GitHubError

        if not cfg.github.repository:
            raise _fail("Error", "repository is not set (GITHUB_REPOSITORY or --repo)")
        if not cfg.github.token:
            raise _fail("Error", "GITHUB_TOKEN is not set")
        try:
            client = GitHubClient(cfg.github.repository, cfg.github.token, cfg.github.api_url)
        except GitHubError as exc:
            raise _fail("Error", exc) from exc

    if verbose:
        console.print(f"[dim]Repo root: {repo_root}[/dim]")
        console.print(f"[dim]Range: {cfg.scan.base_ref}...{cfg.scan.head_ref}[/dim]")
        console.print(f"[dim]Mode: {'dry-run' if dry_run else cfg.comment.mode}[/dim]")

    provider = GitDiffProvider(repo_root, cfg.scan.base_ref, cfg.scan.head_ref)
    try:
        result = run(
            provider,
            cfg,
            client=client,
            pr_number=pr_number,
            console=console,
            dry_run=dry_run,
            verbose=verbose,
        )
    except ReviewError as exc:
        raise _fail("Error", exc) from exc

    # --- Output ---
    if cfg.output.format == "json":
        print(json_report.render(result))
    elif not result.files_checked:
        console.print("[dim]No changed documentation files.[/dim]")
    else:
        terminal.render(result, console, show_summary=cfg.output.show_summary)

    raise typer.Exit(code=0)


# ── extract ───────────────────────────────────────────────────────────────────


@app.command()
def extract(
    diff_file: str = typer.Argument("-", help="Unified diff file, or - for stdin"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
) -> None:
    """Print the deleted headings found in a unified diff."""
    from anchorguard.git.diff_parser import extract_heading_changes

    if diff_file == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(diff_file).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise _fail("Error", exc) from exc

    changes = extract_heading_changes(text)
    if json_output:
        print(json.dumps(
            [{"line": c.line, "heading": c.heading, "level": c.level} for c in changes],
            indent=2,
        ))
    else:
        for change in changes:
            print(f"{change.line}\t{change.content}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .anchorguard.toml"),
) -> None:
    """Generate a starter .anchorguard.toml in the repo root."""
    from anchorguard.config.defaults import DEFAULT_TOML
    from anchorguard.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"anchorguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """anchorguard — catch removed headings before their anchor links break."""
