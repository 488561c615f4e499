"""Open Code Review configuration management.

Loads configuration from .ocr/config.yaml with sensible defaults.

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .ocr/config.yaml (project-local)
3. Built-in defaults

Thread Safety:
    Uses threading.Lock for the lazily cached global config.
"""


import logging
import threading
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from ocr.foundation.errors import ErrorCode, config_error

logger = logging.getLogger(__name__)

OCR_DIR_NAME = ".ocr"
CONFIG_FILE_NAME = "config.yaml"


@dataclass(frozen=True, slots=True)
class ProgressConfig:
    """Tuning for the live progress viewer."""

    debounce_ms: int = 50
    """Coalescing window for timer ticks and filesystem events."""

    tick_seconds: float = 1.0
    """Periodic refresh interval (keeps the elapsed clock moving)."""

    session_watch_depth: int = 4
    """Directory depth watched below a session (map/runs/run-N/*.md)."""

    root_watch_depth: int = 3
    """Directory depth watched below .ocr for new sessions."""


@dataclass(frozen=True, slots=True)
class OcrConfig:
    """Root configuration for the OCR CLI."""

    progress: ProgressConfig = field(default_factory=ProgressConfig)
    """Progress viewer configuration."""

    debug: bool = False
    """Enable debug logging by default."""


# Global config instance (lazy-loaded, thread-safe)
_config: OcrConfig | None = None
_config_lock = threading.Lock()


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_config(data: dict[str, Any]) -> OcrConfig:
    """Convert a merged dict to OcrConfig, validating numeric fields."""
    progress_data = data.get("progress") or {}
    known = set(ProgressConfig.__dataclass_fields__)
    unknown = set(progress_data) - known
    if unknown:
        logger.warning("Ignoring unknown progress config keys: %s", sorted(unknown))

    progress = ProgressConfig(**{k: v for k, v in progress_data.items() if k in known})
    for entry in fields(ProgressConfig):
        value = getattr(progress, entry.name)
        # Millisecond and depth settings go to watchfiles, which needs integers
        accepted = (int,) if entry.type is int else (int, float)
        if isinstance(value, bool) or not isinstance(value, accepted) or value <= 0:
            kind = "integer" if entry.type is int else "number"
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                key=f"progress.{entry.name}",
                detail=f"expected a positive {kind}, got {value!r}",
            )

    return OcrConfig(progress=progress, debug=bool(data.get("debug", False)))


def load_config(path: str | Path | None = None, root: Path | None = None) -> OcrConfig:
    """Load configuration from file with defaults.

    Args:
        path: Optional explicit config file path.
        root: Project root holding the .ocr directory (default: cwd).

    Returns:
        Merged OcrConfig instance.
    """
    global _config

    config_dict: dict[str, Any] = {
        "progress": asdict(ProgressConfig()),
        "debug": False,
    }

    config_paths = []
    if path:
        config_paths.append(Path(path))
    config_paths.append((root or Path.cwd()) / OCR_DIR_NAME / CONFIG_FILE_NAME)

    for config_path in config_paths:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Skipping unreadable config %s: %s", config_path, e)
                continue
            if isinstance(file_config, dict):
                _deep_update(config_dict, file_config)
                break

    config = _dict_to_config(config_dict)

    with _config_lock:
        _config = config

    return config


def get_config() -> OcrConfig:
    """Get the global config, loading it on first use."""
    global _config
    if _config is not None:
        return _config
    with _config_lock:
        if _config is not None:
            return _config
    return load_config()


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    with _config_lock:
        _config = None
