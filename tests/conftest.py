"""Pytest fixtures for OCR tests."""

import io
import json
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

from ocr.foundation.config import reset_config
from ocr.interface.cli.core.theme import create_ocr_console
from ocr.progress.render_utils import TerminalRenderer, plain

SessionFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterable[None]:
    """Never leak the cached global config between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def ocr_project(tmp_path: Path) -> Path:
    """A project directory with OCR installed (.ocr/skills + .ocr/sessions)."""
    (tmp_path / ".ocr" / "skills").mkdir(parents=True)
    (tmp_path / ".ocr" / "sessions").mkdir()
    return tmp_path


@pytest.fixture
def sessions_dir(ocr_project: Path) -> Path:
    return ocr_project / ".ocr" / "sessions"


@pytest.fixture
def make_session(sessions_dir: Path) -> SessionFactory:
    """Build a session directory.

    Args (of the returned factory):
        name: Session directory name
        state: Dict written as state.json (skipped when None)
        files: Mapping of session-relative path -> content
        dirs: Session-relative directories to create
    """

    def _make(
        name: str = "2026-01-15-main",
        state: dict[str, Any] | None = None,
        files: dict[str, str] | None = None,
        dirs: Iterable[str] = (),
    ) -> Path:
        session_path = sessions_dir / name
        session_path.mkdir(parents=True, exist_ok=True)
        if state is not None:
            write_state(session_path, state)
        for rel in dirs:
            (session_path / rel).mkdir(parents=True, exist_ok=True)
        for rel, content in (files or {}).items():
            target = session_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return session_path

    return _make


def write_state(session_path: Path, state: dict[str, Any]) -> None:
    (session_path / "state.json").write_text(json.dumps(state))


@pytest.fixture
def renderer() -> TerminalRenderer:
    """Renderer writing to an in-memory console."""
    return TerminalRenderer(console=create_ocr_console(file=io.StringIO()))


@pytest.fixture
def frame_text() -> Callable[[list[str]], str]:
    """Flatten frame lines to plain text for assertions."""

    def _text(lines: list[str]) -> str:
        return "\n".join(plain(line) for line in lines)

    return _text
