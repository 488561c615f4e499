"""Locate the session the viewer should follow."""

from pathlib import Path

from ocr.progress.artifacts import dir_exists
from ocr.progress.detector import is_session_active


def find_latest_active_session(sessions_dir: Path) -> str | None:
    """Return the newest session directory that is still active.

    Session names are date-prefixed (`<YYYY-MM-DD>-<branch>`), so sorting by
    name descending is reverse-chronological.
    """
    try:
        entries = [entry for entry in sessions_dir.iterdir() if dir_exists(entry)]
    except OSError:
        return None

    for entry in sorted(entries, key=lambda p: p.name, reverse=True):
        if is_session_active(entry):
            return entry.name
    return None
