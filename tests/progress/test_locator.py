"""Tests for the session locator."""

from pathlib import Path

from ocr.progress.locator import find_latest_active_session


class TestFindLatestActiveSession:
    def test_missing_root(self, tmp_path: Path) -> None:
        assert find_latest_active_session(tmp_path / "sessions") is None

    def test_empty_root(self, sessions_dir: Path) -> None:
        assert find_latest_active_session(sessions_dir) is None

    def test_newest_active_wins(self, make_session) -> None:
        make_session("2026-01-10-old", state={"current_phase": "reviews"})
        make_session("2026-01-12-done", state={"current_phase": "complete"})
        make_session("2026-01-11-new")

        sessions_dir = make_session("2026-01-09-older").parent
        assert find_latest_active_session(sessions_dir) == "2026-01-11-new"

    def test_closed_sessions_skipped(self, make_session) -> None:
        path = make_session("2026-01-10-a", state={"status": "closed", "current_phase": "reviews"})
        assert find_latest_active_session(path.parent) is None

    def test_files_are_ignored(self, sessions_dir: Path) -> None:
        (sessions_dir / "2099-01-01-notes.md").write_text("not a session")
        assert find_latest_active_session(sessions_dir) is None
