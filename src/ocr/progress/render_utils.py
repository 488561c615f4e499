"""Shared rendering utilities for progress strategies.

Frames are lists of Rich markup strings. Strategies build them as pure
functions of state; `TerminalRenderer` is the single place that writes
them to the terminal.
"""

import math
from dataclasses import dataclass, field

from rich.console import Console
from rich.live import Live
from rich.text import Text

BAR_WIDTH = 24
COMPACT_BAR_WIDTH = 10

BAR_FILLED = "━"
BAR_EMPTY = "─"

GLYPH_DONE = "✓"
GLYPH_CURRENT = "▸"
GLYPH_PENDING = "·"
GLYPH_AGENT_PENDING = "○"

TITLE = "  [ocr.title]Open Code Review[/]"
EXIT_HINT = "  [ocr.dim]Ctrl+C to exit[/]"
WAITING_MESSAGE = "  [ocr.dim]Waiting for session...[/]"
SEPARATOR = "[ocr.dim]  │  [/]"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def format_duration(ms: float) -> str:
    """Format milliseconds as `1h 2m 3s`, `2m 3s` or `3s`.

    Negative values are clamped to 0.
    """
    total_seconds = int(max(0, ms) // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def percent_of(current: int, total: int) -> int:
    if total <= 0:
        return 0
    return max(0, min(100, round_half_up(current / total * 100)))


def render_progress_bar(
    current: int,
    total: int,
    label: str | None = None,
    width: int = BAR_WIDTH,
) -> str:
    """Render a proportional progress bar with percentage and optional label."""
    ratio = current / total if total > 0 else 0.0
    filled = max(0, min(width, round_half_up(ratio * width)))
    bar = f"[ocr.bar]{BAR_FILLED * filled}[/][ocr.dim]{BAR_EMPTY * (width - filled)}[/]"
    percent = f"[ocr.heading]{percent_of(current, total)}%[/]"
    if label:
        return f"{bar}  {percent} [ocr.dim]·[/] [ocr.accent]{label}[/]"
    return f"{bar}  {percent}"


def render_empty_bar(width: int = BAR_WIDTH) -> str:
    return f"[ocr.dim]{BAR_EMPTY * width}[/]  [ocr.dim]0%[/]"


def phase_glyph(is_complete: bool, is_current: bool) -> str:
    """Status glyph for a phase row."""
    if is_complete:
        return f"[ocr.success]{GLYPH_DONE}[/]"
    if is_current:
        return f"[ocr.accent]{GLYPH_CURRENT}[/]"
    return f"[ocr.dim]{GLYPH_PENDING}[/]"


def phase_label(label: str, is_complete: bool, is_current: bool) -> str:
    if is_current:
        return f"[ocr.active]{label}[/]"
    if is_complete:
        return f"[ocr.text]{label}[/]"
    return f"[ocr.dim]{label}[/]"


def agent_glyph(complete: bool) -> str:
    if complete:
        return f"[ocr.success]{GLYPH_DONE}[/]"
    return f"[ocr.dim]{GLYPH_AGENT_PENDING}[/]"


def plain(line: str) -> str:
    """Strip markup from a frame line."""
    return Text.from_markup(line).plain


@dataclass
class TerminalRenderer:
    """Flicker-free single-region terminal updater.

    Remembers the kind and height of the last frame. Switching kind (e.g.
    waiting -> review progress) starts a fresh region: Live erases the old
    frame on refresh, so no padding is carried over. Within one kind every
    frame is padded to at least the previous frame's height.

    Example:
        >>> renderer = TerminalRenderer()
        >>> renderer.show("review-waiting", review_strategy.render_waiting())
        >>> renderer.done()  # final frame stays on screen
    """

    console: Console | None = None
    last_render_type: str | None = field(default=None, init=False)
    last_line_count: int = field(default=0, init=False)
    clear_count: int = field(default=0, init=False)
    _live: Live | None = field(default=None, init=False, repr=False)

    def prepare(self, render_type: str, lines: list[str]) -> tuple[list[str], bool]:
        """Pad the frame and report whether it starts a fresh region.

        Returns:
            (padded lines, needs_clear)
        """
        needs_clear = self.last_render_type != render_type
        self.last_render_type = render_type

        padded = list(lines)
        if not needs_clear and len(padded) < self.last_line_count:
            padded.extend([""] * (self.last_line_count - len(padded)))
        self.last_line_count = len(padded)

        if needs_clear:
            self.clear_count += 1
        return padded, needs_clear

    def show(self, render_type: str, lines: list[str]) -> None:
        """Write a frame, replacing the previous one in place."""
        padded, _ = self.prepare(render_type, lines)
        self._ensure_live().update(Text.from_markup("\n".join(padded)), refresh=True)

    def done(self) -> None:
        """Stop updating, leaving the last frame on screen."""
        if self._live is not None:
            self._live.stop()
            self._live = None

    def reset(self) -> None:
        """Forget the previous frame (used between tests)."""
        self.done()
        self.last_render_type = None
        self.last_line_count = 0
        self.clear_count = 0

    def _ensure_live(self) -> Live:
        if self._live is None:
            if self.console is None:
                from ocr.interface.cli.core.theme import create_ocr_console

                self.console = create_ocr_console()
            self._live = Live(
                Text(""),
                console=self.console,
                auto_refresh=False,
                transient=False,
            )
            self._live.start()
        return self._live
