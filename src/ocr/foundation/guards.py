"""Project setup guards and session directory helpers."""

from dataclasses import dataclass
from pathlib import Path

from ocr.foundation.errors import ErrorCode, OcrError

OCR_DIR_NAME = ".ocr"
SKILLS_DIR_NAME = "skills"
SESSIONS_DIR_NAME = "sessions"


@dataclass(frozen=True, slots=True)
class SetupStatus:
    """Result of inspecting a project for an OCR installation."""

    valid: bool
    ocr_dir: Path
    skills_dir: Path
    sessions_dir: Path
    has_skills: bool
    has_sessions: bool


def check_setup(target_dir: Path) -> SetupStatus:
    """Check if OCR is set up in the target directory."""
    ocr_dir = target_dir / OCR_DIR_NAME
    skills_dir = ocr_dir / SKILLS_DIR_NAME
    sessions_dir = ocr_dir / SESSIONS_DIR_NAME

    has_skills = skills_dir.is_dir()
    return SetupStatus(
        valid=ocr_dir.is_dir() and has_skills,
        ocr_dir=ocr_dir,
        skills_dir=skills_dir,
        sessions_dir=sessions_dir,
        has_skills=has_skills,
        has_sessions=sessions_dir.is_dir(),
    )


def require_setup(target_dir: Path) -> SetupStatus:
    """Require OCR to be set up.

    Raises:
        OcrError: PROJECT_NOT_SET_UP, with a detail explaining what is missing.
    """
    status = check_setup(target_dir)
    if not status.valid:
        if not status.ocr_dir.is_dir():
            detail = "The .ocr directory was not found."
        else:
            detail = "The .ocr/skills directory is missing. OCR may have been partially installed."
        raise OcrError(
            code=ErrorCode.PROJECT_NOT_SET_UP,
            context={"path": str(target_dir), "detail": detail},
        )
    return status


def ensure_sessions_dir(target_dir: Path) -> Path:
    """Ensure .ocr/sessions exists, creating it just in time."""
    sessions_dir = target_dir / OCR_DIR_NAME / SESSIONS_DIR_NAME
    sessions_dir.mkdir(parents=True, exist_ok=True)
    return sessions_dir
