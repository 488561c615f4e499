"""Open Code Review Error System.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints shown by the CLI
- Context for debugging
"""


from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        1xxx - Session errors
        2xxx - Workflow errors
        5xxx - Configuration errors
        6xxx - Runtime errors
    """

    # 1xxx - Session Errors
    SESSION_NOT_FOUND = 1001
    SESSION_STATE_MISSING = 1002

    # 2xxx - Workflow Errors
    WORKFLOW_UNDETERMINED = 2001

    # 5xxx - Configuration Errors
    PROJECT_NOT_SET_UP = 5001
    CONFIG_INVALID = 5002

    # 6xxx - Runtime Errors
    RUNTIME_STATE_INVALID = 6001

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            1: "session",
            2: "workflow",
            5: "config",
            6: "runtime",
        }.get(prefix, "unknown")

    @property
    def is_recoverable(self) -> bool:
        """Whether this error type is typically recoverable."""
        non_recoverable = {
            ErrorCode.PROJECT_NOT_SET_UP,
            ErrorCode.CONFIG_INVALID,
        }
        return self not in non_recoverable


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.SESSION_NOT_FOUND: "Session not found: {session}",
    ErrorCode.SESSION_STATE_MISSING: "Session {session} has no state.json - cannot track progress",

    ErrorCode.WORKFLOW_UNDETERMINED: "Cannot determine workflow type for session {session}",

    ErrorCode.PROJECT_NOT_SET_UP: "OCR is not set up in this directory. {detail}",
    ErrorCode.CONFIG_INVALID: "Invalid configuration for '{key}': {detail}",

    ErrorCode.RUNTIME_STATE_INVALID: "Invalid runtime state: {detail}",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.SESSION_NOT_FOUND: [
        "Check the session name under .ocr/sessions/",
        "Run 'ocr progress' without --session to follow the latest session",
    ],
    ErrorCode.SESSION_STATE_MISSING: [
        "The orchestrating agent must create state.json for progress tracking",
        "Try specifying --workflow review or --workflow map",
    ],
    ErrorCode.WORKFLOW_UNDETERMINED: [
        "Try specifying --workflow review or --workflow map",
    ],
    ErrorCode.PROJECT_NOT_SET_UP: [
        "Run 'ocr init' to set up OCR",
        "Or with npx: npx @open-code-review/cli init",
    ],
    ErrorCode.CONFIG_INVALID: [
        "Fix or remove the '{key}' entry in .ocr/config.yaml",
    ],
}


class OcrError(Exception):
    """Base error type for all Open Code Review errors.

    Example:
        >>> err = OcrError(
        ...     code=ErrorCode.SESSION_NOT_FOUND,
        ...     context={"session": "2026-01-01-main"},
        ... )
        >>> print(err)
        [OCR-1001] Session not found: 2026-01-01-main
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def is_recoverable(self) -> bool:
        return self.code.is_recoverable

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'OCR-1001')."""
        return f"OCR-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"OcrError(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recoverable": self.is_recoverable,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }


# Convenience factory functions

def session_error(
    code: ErrorCode,
    session: str,
    detail: str = "",
    cause: Exception | None = None,
) -> OcrError:
    """Create a session-related error."""
    return OcrError(
        code=code,
        context={"session": session, "detail": detail},
        cause=cause,
    )


def config_error(
    code: ErrorCode,
    key: str = "",
    detail: str = "",
) -> OcrError:
    """Create a configuration error."""
    return OcrError(code=code, context={"key": key, "detail": detail})
