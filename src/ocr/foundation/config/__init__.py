"""Configuration management for Open Code Review."""

from ocr.foundation.config.loader import (
    OcrConfig,
    ProgressConfig,
    get_config,
    load_config,
    reset_config,
)

__all__ = [
    "OcrConfig",
    "ProgressConfig",
    "get_config",
    "load_config",
    "reset_config",
]
