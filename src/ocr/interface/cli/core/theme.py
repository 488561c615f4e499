"""OCR terminal theme.

Frame lines are Rich markup strings using the `ocr.*` style names below;
swapping a colour here restyles every view at once.
"""

from typing import IO

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# RICH THEME
# =============================================================================

OCR_THEME = Theme({
    # Text hierarchy
    "ocr.title": "bold white",
    "ocr.heading": "bold white",
    "ocr.text": "white",
    "ocr.dim": "dim",

    # Phase states
    "ocr.active": "bold cyan",      # ▸ Current phase
    "ocr.accent": "cyan",           # Phase labels, round/run markers
    "ocr.success": "green",         # ✓ Done
    "ocr.warning": "yellow",

    # Bars
    "ocr.bar": "cyan",
    "ocr.review": "blue",           # ◉ Review row in the combined view
    "ocr.map": "green",             # ◉ Map row in the combined view

    # Errors
    "ocr.error": "bold red",
    "ocr.hint": "dim white",
})


def create_ocr_console(file: IO[str] | None = None, stderr: bool = False) -> Console:
    """Create a Rich console with the OCR theme."""
    return Console(theme=OCR_THEME, file=file, stderr=stderr)
