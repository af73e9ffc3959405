"""Tests for the review engine — the full pipeline over fakes."""

import pytest
from rich.console import Console

from anchorguard.api.client import ReviewComment
from anchorguard.config.schema import DEFAULT_MARKER, AnchorGuardConfig
from anchorguard.git.adapter import GitError
from anchorguard.review.engine import ReviewError, collect, run

from conftest import FakeClient, FakeDiffProvider

_quiet = Console(quiet=True)


def _run(provider, client=None, pr_number=5, config=None, **kwargs):
    return run(provider, config or AnchorGuardConfig(), client=client, pr_number=pr_number,
               console=_quiet, **kwargs)


class TestCollect:
    def test_filters_and_extracts(self, sample_diff_renamed_heading, sample_diff_text_only):
        provider = FakeDiffProvider({
            "docs/guide.md": sample_diff_renamed_heading,
            "docs/faq.md": sample_diff_text_only,
            "src/app.py": "@@ -1 +1 @@\n-# comment\n+# comment!\n",
        })
        files = collect(provider, AnchorGuardConfig())
        assert [f.path for f in files] == ["docs/guide.md", "docs/faq.md"]
        assert [len(f.changes) for f in files] == [1, 0]
        assert "src/app.py" not in provider.requested

    def test_git_error_becomes_review_error(self):
        class Broken:
            def list_changed_files(self, prefix="", extensions=()):
                raise GitError("git error: fatal: bad revision")

            def get_file_diff(self, path):
                return ""

        with pytest.raises(ReviewError):
            collect(Broken(), AnchorGuardConfig())


class TestRun:
    def test_end_to_end(self, sample_diff_renamed_heading, sample_diff_two_hunks):
        provider = FakeDiffProvider({
            "docs/guide.md": sample_diff_renamed_heading,
            "docs/other.md": sample_diff_two_hunks,
        })
        client = FakeClient()
        result = _run(provider, client)
        assert result.total_changes == 3
        assert len(result.posted) == 3
        assert len(client.reviews) == 2  # review mode: one per file
        assert result.dry_run is False

    def test_no_changes(self, sample_diff_text_only):
        client = FakeClient()
        result = _run(FakeDiffProvider({"docs/faq.md": sample_diff_text_only}), client)
        assert result.total_changes == 0
        assert result.files_checked == ["docs/faq.md"]
        assert client.call_count == 0

    def test_no_files(self):
        result = _run(FakeDiffProvider({}), FakeClient())
        assert result.files_checked == []
        assert result.outcomes == []

    def test_dry_run_makes_no_calls(self, sample_diff_renamed_heading):
        client = FakeClient(fail_lookup=True)
        result = _run(FakeDiffProvider({"docs/guide.md": sample_diff_renamed_heading}), client, dry_run=True)
        assert result.dry_run is True
        assert result.total_changes == 1
        assert result.outcomes == []

    def test_without_client_is_dry_run(self, sample_diff_renamed_heading):
        result = _run(FakeDiffProvider({"docs/guide.md": sample_diff_renamed_heading}), None, None)
        assert result.dry_run is True

    def test_lookup_failure_aborts(self, sample_diff_renamed_heading):
        client = FakeClient(fail_lookup=True)
        with pytest.raises(ReviewError, match="404"):
            _run(FakeDiffProvider({"docs/guide.md": sample_diff_renamed_heading}), client)

    def test_failed_file_does_not_stop_others(self, sample_diff_renamed_heading):
        provider = FakeDiffProvider({
            "docs/a.md": sample_diff_renamed_heading,
            "docs/b.md": sample_diff_renamed_heading,
        })
        client = FakeClient(fail_paths=("docs/a.md",))
        result = _run(provider, client)
        assert [o.status for o in result.outcomes] == ["failed", "posted"]
        assert len(client.reviews) == 1

    def test_rerun_is_deduplicated(self, sample_diff_renamed_heading):
        existing = [ReviewComment(path="docs/guide.md", body=f"🤖 Beep boop! {DEFAULT_MARKER}", line=2)]
        client = FakeClient(existing=existing)
        result = _run(FakeDiffProvider({"docs/guide.md": sample_diff_renamed_heading}), client)
        assert [o.status for o in result.outcomes] == ["duplicate"]
        assert client.call_count == 0

    def test_comment_mode(self, sample_diff_two_hunks):
        cfg = AnchorGuardConfig()
        cfg.comment.mode = "comment"
        client = FakeClient()
        _run(FakeDiffProvider({"docs/guide.md": sample_diff_two_hunks}), client, config=cfg)
        assert [c["line"] for c in client.comments] == [3, 22]
        assert client.reviews == []

    def test_client_without_pr_number_makes_no_calls(self, sample_diff_renamed_heading):
        client = FakeClient(fail_lookup=True)
        result = _run(FakeDiffProvider({"docs/guide.md": sample_diff_renamed_heading}), client, None)
        assert result.dry_run is True
        assert result.outcomes == []
        assert client.call_count == 0
