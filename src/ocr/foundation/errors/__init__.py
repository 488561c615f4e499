"""Error system for Open Code Review."""

from ocr.foundation.errors.errors import (
    ERROR_MESSAGES,
    RECOVERY_HINTS,
    ErrorCode,
    OcrError,
    config_error,
    session_error,
)

__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "RECOVERY_HINTS",
    "OcrError",
    "config_error",
    "session_error",
]
