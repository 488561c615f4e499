"""Open Code Review: live progress tracking for multi-agent code review sessions."""

__version__ = "1.0.0"

from ocr.foundation.errors import ErrorCode, OcrError

__all__ = ["__version__", "ErrorCode", "OcrError"]
