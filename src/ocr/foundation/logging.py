"""Logging configuration for the OCR CLI.

Provides centralized logging setup with sensible defaults:
- Default: WARNING level (quiet operation, the live view owns the terminal)
- --debug flag: DEBUG level with full context
- Config file: debug: true in .ocr/config.yaml
- Persistent logs: Stored in .ocr/logs/ with rotation, only when .ocr/ exists

Usage:
    from ocr.foundation.logging import configure_logging
    configure_logging(debug=debug)

Priority for level resolution (highest to lowest):
    1. Explicit `level` parameter (programmatic override)
    2. `debug=True` parameter (--debug flag)
    3. WARNING (default)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

_DEBUG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
_DEFAULT_FORMAT = "%(name)s: %(message)s"

_NOISY_LOGGERS = (
    "asyncio",
    "watchfiles",
    "markdown_it",
)

_MAX_LOG_SESSIONS = 10


def _get_log_directory(root: Path | None = None) -> Path | None:
    """Get or create .ocr/logs/, or None when the project has no .ocr dir."""
    ocr_dir = (root or Path.cwd()) / ".ocr"
    if not ocr_dir.is_dir():
        return None
    log_dir = ocr_dir / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir


def _cleanup_old_logs(log_dir: Path, max_sessions: int = _MAX_LOG_SESSIONS) -> None:
    """Remove old progress logs, keeping only the most recent N."""
    log_files = sorted(
        log_dir.glob("progress_*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )
    for old_log in log_files[max_sessions:]:
        try:
            old_log.unlink()
        except OSError:
            pass  # Another process may have removed it


def configure_logging(
    *,
    debug: bool = False,
    level: int | str | None = None,
    stream: object = None,
    persist: bool = False,
    root: Path | None = None,
) -> None:
    """Configure logging for the OCR CLI.

    Args:
        debug: Enable DEBUG level with detailed format
        level: Override log level (int or string like "DEBUG", "INFO")
        stream: Output stream (default: stderr)
        persist: Also write a log file under .ocr/logs/
        root: Project root holding .ocr (default: cwd)
    """
    if level is not None:
        resolved_level = _parse_level(level)
    elif debug:
        resolved_level = logging.DEBUG
    else:
        resolved_level = logging.WARNING

    console_format = _DEBUG_FORMAT if resolved_level <= logging.DEBUG else _DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if persist else resolved_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(logging.Formatter(console_format))
    root_logger.addHandler(console_handler)

    if persist:
        try:
            log_dir = _get_log_directory(root)
            if log_dir is not None:
                _cleanup_old_logs(log_dir)
                timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
                file_handler = logging.FileHandler(
                    log_dir / f"progress_{timestamp}.log", mode="w", encoding="utf-8"
                )
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
                root_logger.addHandler(file_handler)
        except OSError as e:
            sys.stderr.write(f"Warning: Could not enable persistent logging: {e}\n")

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, debug=%s, persist=%s",
        logging.getLevelName(resolved_level),
        debug,
        persist,
    )


def _parse_level(level: int | str) -> int:
    """Parse log level from int or string."""
    if isinstance(level, int):
        return level
    numeric = getattr(logging, level.upper(), None)
    if isinstance(numeric, int):
        return numeric
    try:
        return int(level)
    except ValueError:
        return logging.WARNING
