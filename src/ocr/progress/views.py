"""Frames that aren't owned by a single workflow strategy."""

from pathlib import Path

from rich.markup import escape

from ocr.progress.render_utils import (
    BAR_EMPTY,
    BAR_FILLED,
    COMPACT_BAR_WIDTH,
    EXIT_HINT,
    TITLE,
    WAITING_MESSAGE,
    percent_of,
    render_empty_bar,
    round_half_up,
)
from ocr.progress.strategy import get_strategy
from ocr.progress.types import WorkflowType

GENERIC_WAITING = "generic-waiting"
COMBINED_PROGRESS = "combined-progress"

# Display order, label and bar colour per workflow in the combined view
_COMPACT_ROWS: tuple[tuple[WorkflowType, str, str], ...] = (
    (WorkflowType.REVIEW, "◉ Review", "ocr.review"),
    (WorkflowType.MAP, "◉ Map   ", "ocr.map"),
)


def render_generic_waiting() -> list[str]:
    """Waiting frame used when no workflow has been picked yet."""
    return [
        "",
        TITLE,
        "",
        WAITING_MESSAGE,
        "",
        f"  {render_empty_bar()}",
        "",
        "  [ocr.dim]Run [/][ocr.text]/ocr-review[/][ocr.dim] or [/]"
        "[ocr.text]/ocr-map[/][ocr.dim] to start[/]",
        "",
        EXIT_HINT,
        "",
    ]


def _compact_bar(percent: int, style: str) -> str:
    filled = max(0, min(COMPACT_BAR_WIDTH, round_half_up(percent / 10)))
    return f"[{style}]{BAR_FILLED * filled}[/][ocr.dim]{BAR_EMPTY * (COMPACT_BAR_WIDTH - filled)}[/]"


def render_combined_progress(
    session_path: Path,
    preserved_start_times: dict[WorkflowType, int | None],
) -> list[str]:
    """Compact one-line-per-workflow frame for simultaneous workflows."""
    lines = [
        "",
        f"{TITLE}[ocr.warning] · Parallel Workflows[/]",
        "",
        f"  [ocr.text]{escape(session_path.name)}[/]",
        "",
    ]

    for workflow_type, label, style in _COMPACT_ROWS:
        strategy = get_strategy(workflow_type)
        if strategy is None:
            continue
        state = strategy.parse_state(session_path, preserved_start_times.get(workflow_type))
        if state is None:
            lines.append(f"  [{style}]{label}[/]  [ocr.dim]{BAR_EMPTY * COMPACT_BAR_WIDTH}  0%[/]")
            continue

        percent = percent_of(state.phase_number, strategy.total_phases)
        current = next((p for p in strategy.phases if p.key == state.phase), None)
        phase = current.label if current else state.phase
        lines.append(
            f"  [{style}]{label}[/]  {_compact_bar(percent, style)}  "
            f"[ocr.text]{percent}%[/][ocr.dim] · [/][ocr.accent]{escape(phase)}[/]"
        )

    lines.extend([
        "",
        "  [ocr.dim]Use [/][ocr.text]--workflow review[/][ocr.dim] or [/]"
        "[ocr.text]--workflow map[/][ocr.dim] for details[/]",
        "",
        EXIT_HINT,
        "",
    ])
    return lines
