"""Tests for project setup guards."""

from pathlib import Path

import pytest

from ocr.foundation.errors import ErrorCode, OcrError
from ocr.foundation.guards import (
    check_setup,
    ensure_sessions_dir,
    require_setup,
)


class TestCheckSetup:
    def test_installed_project(self, ocr_project: Path) -> None:
        status = check_setup(ocr_project)

        assert status.valid
        assert status.has_skills
        assert status.has_sessions

    def test_bare_directory(self, tmp_path: Path) -> None:
        status = check_setup(tmp_path)
        assert not status.valid
        assert not status.has_skills

    def test_partial_install(self, tmp_path: Path) -> None:
        (tmp_path / ".ocr").mkdir()
        assert not check_setup(tmp_path).valid


class TestRequireSetup:
    def test_passes_when_installed(self, ocr_project: Path) -> None:
        assert require_setup(ocr_project).valid

    def test_missing_ocr_dir(self, tmp_path: Path) -> None:
        with pytest.raises(OcrError) as exc_info:
            require_setup(tmp_path)

        error = exc_info.value
        assert error.code == ErrorCode.PROJECT_NOT_SET_UP
        assert "The .ocr directory was not found." in error.message
        assert "Run 'ocr init' to set up OCR" in error.recovery_hints

    def test_missing_skills_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".ocr").mkdir()
        with pytest.raises(OcrError) as exc_info:
            require_setup(tmp_path)
        assert "partially installed" in exc_info.value.message


class TestSessionHelpers:
    def test_ensure_sessions_dir_creates(self, tmp_path: Path) -> None:
        (tmp_path / ".ocr" / "skills").mkdir(parents=True)
        sessions_dir = ensure_sessions_dir(tmp_path)

        assert sessions_dir == tmp_path / ".ocr" / "sessions"
        assert sessions_dir.is_dir()
        # Idempotent
        assert ensure_sessions_dir(tmp_path) == sessions_dir
