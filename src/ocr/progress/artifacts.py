"""Read-only access to session artifacts.

All readers here fail soft: a missing, half-written or unreadable file is
reported as "no data" rather than raised, because the external agent may be
writing while we read.
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from ocr.progress.types import StateJson

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"

ROUNDS_DIR = "rounds"
MAP_DIR = "map"
RUNS_DIR = "runs"
REVIEWS_DIR = "reviews"

ROUND_PREFIX = "round-"
RUN_PREFIX = "run-"


def load_state_json(session_path: Path) -> StateJson | None:
    """Load `<session>/state.json`, or None if absent or unparseable."""
    state_path = session_path / STATE_FILE
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Unreadable %s: %s", state_path, e)
        return None
    if not isinstance(data, dict):
        return None
    return StateJson.from_dict(data)


def numbered_dirs(parent: Path, prefix: str) -> list[tuple[int, Path]]:
    """List `<prefix><n>` subdirectories of parent, ordered by n ascending."""
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    found: list[tuple[int, Path]] = []
    try:
        entries = list(parent.iterdir())
    except OSError:
        return []
    for entry in entries:
        match = pattern.match(entry.name)
        if match and dir_exists(entry):
            found.append((int(match.group(1)), entry))
    found.sort(key=lambda item: item[0])
    return found


def list_markdown_files(directory: Path) -> list[Path]:
    """Markdown files directly inside directory, sorted by name."""
    try:
        return sorted(
            (p for p in directory.iterdir() if p.suffix == ".md" and p.is_file()),
            key=lambda p: p.name,
        )
    except OSError:
        return []


def read_text(path: Path) -> str | None:
    """Read a UTF-8 file, or None if it vanished or can't be decoded."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def parse_timestamp_ms(value: str | None) -> int | None:
    """Parse an ISO-8601 timestamp to epoch milliseconds.

    Naive timestamps are taken as UTC. Returns None for missing or
    malformed values.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def dir_exists(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def file_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False
