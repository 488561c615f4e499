"""CLI Error Handler.

Renders OcrError (and anything unexpected, wrapped as one) on stderr with
its error ID and numbered recovery hints, then exits 1.
"""

import logging
import sys
from typing import NoReturn

from rich.text import Text

from ocr.foundation.errors import ErrorCode, OcrError
from ocr.interface.cli.core.theme import create_ocr_console

logger = logging.getLogger(__name__)


def _as_ocr_error(error: OcrError | Exception) -> OcrError:
    if isinstance(error, OcrError):
        return error
    return OcrError(
        code=ErrorCode.RUNTIME_STATE_INVALID,
        context={"detail": str(error)},
        cause=error,
    )


def handle_error(error: OcrError | Exception) -> NoReturn:
    """Report an error and exit.

    Args:
        error: The error to handle (OcrError or generic Exception)

    Raises:
        SystemExit: Always exits with code 1
    """
    error = _as_ocr_error(error)
    logger.debug("CLI error: %s", error.to_dict(), exc_info=error.cause)
    _print_human_error(error)
    sys.exit(1)


def _print_human_error(error: OcrError) -> None:
    console = create_ocr_console(stderr=True)

    header = Text()
    header.append("✗ ", style="ocr.error")
    header.append(error.error_id, style="ocr.error")
    header.append(f" {error.message}")
    console.print(header)

    hints = error.recovery_hints
    if hints:
        console.print("\n[ocr.heading]What you can do:[/]")
        for i, hint in enumerate(hints, 1):
            console.print(f"  {i}. {hint}", markup=False, highlight=False)
