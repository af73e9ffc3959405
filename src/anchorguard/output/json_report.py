"""JSON reporter for CI logs."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from anchorguard.review.models import RunResult


def to_dict(result: RunResult) -> Dict[str, Any]:
    """Convert RunResult to a JSON-serialisable dict."""
    changes: List[Dict[str, Any]] = []
    for file in result.files:
        for change in file.changes:
            changes.append({
                "file": file.path,
                "line": change.line,
                "heading": change.heading,
                "level": change.level,
            })

    outcomes = [
        {
            "file": o.path,
            "line": o.line,
            "heading": o.heading,
            "status": o.status,
            **({"detail": o.detail} if o.detail else {}),
        }
        for o in result.outcomes
    ]

    return {
        "version": "1.0",
        "pr_number": result.pr_number,
        "dry_run": result.dry_run,
        "files_checked": result.files_checked,
        "total_changes": result.total_changes,
        "changes": changes,
        "outcomes": outcomes,
        "posted": len(result.posted),
        "failed": len(result.failed),
        "duration_ms": result.duration_ms,
    }


def render(result: RunResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
