"""Review workflow progress strategy.

Tracks progress for the 8-phase code review workflow. Progress is derived
deterministically from filesystem artifacts:

    <session>/discovered-standards.md        context discovery done
    <session>/context.md                     change context + analysis done
    <session>/rounds/round-<n>/reviews/*.md  one file per reviewer
    <session>/rounds/round-<n>/discourse.md  discourse done
    <session>/rounds/round-<n>/final.md      synthesis done
"""

import re
from pathlib import Path

from rich.markup import escape

from ocr.progress.artifacts import (
    REVIEWS_DIR,
    ROUND_PREFIX,
    ROUNDS_DIR,
    file_exists,
    list_markdown_files,
    load_state_json,
    now_ms,
    numbered_dirs,
    parse_timestamp_ms,
    read_text,
)
from ocr.progress.render_utils import (
    EXIT_HINT,
    GLYPH_DONE,
    SEPARATOR,
    TITLE,
    WAITING_MESSAGE,
    agent_glyph,
    format_duration,
    phase_glyph,
    phase_label,
    render_empty_bar,
    render_progress_bar,
)
from ocr.progress.types import (
    PhaseInfo,
    PhaseStatus,
    ReviewerStatus,
    ReviewWorkflowState,
    RoundInfo,
    StateJson,
    WorkflowType,
)

REVIEW_PHASES: tuple[PhaseInfo, ...] = (
    PhaseInfo("context", "Context Discovery"),
    PhaseInfo("change-context", "Change Context"),
    PhaseInfo("analysis", "Tech Lead Analysis"),
    PhaseInfo("reviews", "Parallel Reviews"),
    PhaseInfo("aggregation", "Aggregate Findings"),
    PhaseInfo("discourse", "Reviewer Discourse"),
    PhaseInfo("synthesis", "Final Synthesis"),
    PhaseInfo("complete", "Complete"),
)

# Phase number of "reviews"; anything beyond means reviews are in
REVIEWS_PHASE_NUMBER = 4

FINDING_PATTERN = re.compile(r"^##\s+(Finding|Issue|Suggestion)", re.MULTILINE)
NUMBERED_NAME_PATTERN = re.compile(r"^(.+)-(\d+)$")


def count_findings(path: Path) -> int:
    """Count `## Finding` / `## Issue` / `## Suggestion` headings in a review."""
    content = read_text(path)
    if content is None:
        return 0
    return len(FINDING_PATTERN.findall(content))


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_reviewer_name(filename: str) -> str:
    """Turn a reviewer file name into a display name.

    >>> format_reviewer_name("principal-1.md")
    'Principal #1'
    >>> format_reviewer_name("security.md")
    'Security'
    """
    base = filename.removesuffix(".md")
    match = NUMBERED_NAME_PATTERN.match(base)
    if match:
        return f"{_capitalize(match.group(1))} #{match.group(2)}"
    return _capitalize(base)


def derive_rounds(rounds_dir: Path) -> tuple[RoundInfo, ...]:
    """Summaries of every `round-<n>` directory, ordered by round number."""
    rounds = []
    for number, round_path in numbered_dirs(rounds_dir, ROUND_PREFIX):
        reviewers = tuple(
            p.name.removesuffix(".md") for p in list_markdown_files(round_path / REVIEWS_DIR)
        )
        rounds.append(
            RoundInfo(
                round=number,
                is_complete=file_exists(round_path / "final.md"),
                reviewers=reviewers,
            )
        )
    return tuple(rounds)


class ReviewProgressStrategy:
    """Progress strategy for the review workflow."""

    workflow_type = WorkflowType.REVIEW
    phases = REVIEW_PHASES
    total_phases = 8

    def parse_state(
        self,
        session_path: Path,
        preserved_start_time: int | None = None,
    ) -> ReviewWorkflowState | None:
        state = load_state_json(session_path)
        if state is None:
            return None
        return self._parse_from_state_json(state, session_path, preserved_start_time)

    def _parse_from_state_json(
        self,
        state: StateJson,
        session_path: Path,
        preserved_start_time: int | None,
    ) -> ReviewWorkflowState:
        if preserved_start_time is not None:
            start_time = preserved_start_time
        else:
            start_time = (
                parse_timestamp_ms(state.round_started_at)
                or parse_timestamp_ms(state.started_at)
                or now_ms()
            )

        rounds_dir = session_path / ROUNDS_DIR
        rounds = derive_rounds(rounds_dir)

        # state.json may name a round whose directory doesn't exist yet
        highest_existing = max((r.round for r in rounds), default=1)
        current_round = max(1, min(state.current_round or 1, highest_existing))
        round_dir = rounds_dir / f"{ROUND_PREFIX}{current_round}"

        reviewers = tuple(
            ReviewerStatus(
                name=path.name.removesuffix(".md"),
                display_name=format_reviewer_name(path.name),
                status=PhaseStatus.COMPLETE,
                findings=count_findings(path),
            )
            for path in list_markdown_files(round_dir / REVIEWS_DIR)
        )

        context_complete = file_exists(session_path / "discovered-standards.md")
        change_context_complete = file_exists(session_path / "context.md")
        discourse_complete = file_exists(round_dir / "discourse.md")
        synthesis_complete = file_exists(round_dir / "final.md")
        # Reviews have no marker of their own; downstream artifacts or the
        # agent moving past the reviews phase settle it.
        reviews_complete = (
            discourse_complete
            or synthesis_complete
            or state.phase_number > REVIEWS_PHASE_NUMBER
        )

        return ReviewWorkflowState(
            session=session_path.name,
            phase=state.current_phase,
            phase_number=state.phase_number,
            total_phases=self.total_phases,
            start_time=start_time,
            complete=state.current_phase == "complete",
            context_complete=context_complete,
            change_context_complete=change_context_complete,
            analysis_complete=change_context_complete,
            reviews_complete=reviews_complete,
            aggregation_complete=reviews_complete,
            discourse_complete=discourse_complete,
            synthesis_complete=synthesis_complete,
            current_round=current_round,
            rounds=rounds,
            reviewers=reviewers,
        )

    def render(self, state: ReviewWorkflowState, now: int | None = None) -> list[str]:
        lines: list[str] = ["", TITLE, ""]

        elapsed = max(0, (now if now is not None else now_ms()) - state.start_time)
        round_info = (
            f"[ocr.accent] Round {state.current_round}[/][ocr.dim]  ·  [/]"
            if state.current_round > 1
            else ""
        )
        lines.append(
            f"  [ocr.text]{escape(state.session)}[/][ocr.dim]  ·  [/]"
            f"{round_info}[ocr.text]{format_duration(elapsed)}[/]"
        )
        lines.append("")

        progress_phases = self.total_phases if state.complete else state.phase_number
        current = next((p for p in self.phases if p.key == state.phase), None)
        label = "Done" if state.complete else (current.label if current else None)
        lines.append(f"  {render_progress_bar(progress_phases, self.total_phases, label)}")
        lines.append("")

        completion = {
            "context": state.context_complete,
            "change-context": state.change_context_complete,
            "analysis": state.analysis_complete,
            "reviews": state.reviews_complete,
            "aggregation": state.aggregation_complete,
            "discourse": state.discourse_complete,
            "synthesis": state.synthesis_complete,
            "complete": state.complete,
        }

        for phase in self.phases:
            is_complete = completion.get(phase.key, False)
            is_current = state.phase == phase.key and not state.complete
            lines.append(
                f"  {phase_glyph(is_complete, is_current)} "
                f"{phase_label(phase.label, is_complete, is_current)}"
            )
            if phase.key == "reviews" and state.reviewers:
                lines.extend(self._reviewer_lines(state))

        lines.append("")

        if state.complete:
            total = sum(r.findings for r in state.reviewers)
            plural = "" if total == 1 else "s"
            lines.append(
                f"[ocr.success]  {GLYPH_DONE} Complete[/][ocr.dim] · [/]"
                f"[ocr.text]{total} finding{plural}[/]"
            )
            lines.append(
                f"    [ocr.dim]→ [/][ocr.text].ocr/sessions/{escape(state.session)}/"
                f"rounds/round-{state.current_round}/final.md[/]"
            )
        else:
            lines.append(EXIT_HINT)
        lines.append("")
        return lines

    def _reviewer_lines(self, state: ReviewWorkflowState) -> list[str]:
        lines = []
        if state.current_round > 1:
            lines.append(f"    [ocr.accent]Round {state.current_round}[/]")

        entries = []
        for reviewer in state.reviewers:
            count_style = "ocr.accent" if reviewer.findings > 0 else "ocr.dim"
            entries.append(
                f"{agent_glyph(reviewer.status == PhaseStatus.COMPLETE)} "
                f"[ocr.dim]{escape(reviewer.display_name)}[/]"
                f"[{count_style}] {reviewer.findings}[/]"
            )
        lines.append("    " + SEPARATOR.join(entries))

        for previous in state.rounds[:-1]:
            lines.append(
                f"[ocr.dim]    Round {previous.round}[/] {agent_glyph(previous.is_complete)} "
                f"[ocr.dim]{len(previous.reviewers)} reviewers[/]"
            )
        return lines

    def render_waiting(self) -> list[str]:
        return [
            "",
            TITLE,
            "",
            WAITING_MESSAGE,
            "",
            f"  {render_empty_bar()}",
            "",
            "  [ocr.dim]Run [/][ocr.text]/ocr-review[/][ocr.dim] to start[/]",
            "",
            EXIT_HINT,
            "",
        ]


review_strategy = ReviewProgressStrategy()
