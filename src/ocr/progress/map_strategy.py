"""Map workflow progress strategy.

Tracks progress for the 6-phase Code Review Map workflow. Progress is
derived deterministically from filesystem artifacts:

    <session>/discovered-standards.md                       context done
    <session>/requirements.md                               requirements supplied
    <session>/map/runs/run-<n>/topology.md                  topology done
    <session>/map/runs/run-<n>/flow-analysis.md             flow tracing done
    <session>/map/runs/run-<n>/requirements-mapping.md      mapping done
    <session>/map/runs/run-<n>/map.md                       synthesis done
"""

import logging
import re
from pathlib import Path

from rich.markup import escape

from ocr.progress.artifacts import (
    MAP_DIR,
    RUN_PREFIX,
    RUNS_DIR,
    file_exists,
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
    WAITING_MESSAGE,
    agent_glyph,
    format_duration,
    phase_glyph,
    phase_label,
    render_empty_bar,
    render_progress_bar,
)
from ocr.progress.types import (
    AgentStatus,
    MapRunInfo,
    MapWorkflowState,
    PhaseInfo,
    PhaseStatus,
    StateJson,
    WorkflowType,
)

logger = logging.getLogger(__name__)

MAP_PHASES: tuple[PhaseInfo, ...] = (
    PhaseInfo("map-context", "Context Discovery"),
    PhaseInfo("topology", "Topology Analysis"),
    PhaseInfo("flow-analysis", "Flow Tracing"),
    PhaseInfo("requirements-mapping", "Requirements Mapping"),
    PhaseInfo("synthesis", "Map Synthesis"),
    PhaseInfo("complete", "Complete"),
)

MAP_TITLE = "  [ocr.title]Open Code Review[/][ocr.accent] · Map[/]"

CANONICAL_FILE_LIST = re.compile(r"## Canonical File List.*?```(.*?)```", re.DOTALL)


def count_topology_files(topology_path: Path) -> int:
    """Count entries in the fenced block under `## Canonical File List`."""
    content = read_text(topology_path)
    if content is None:
        return 0
    match = CANONICAL_FILE_LIST.search(content)
    if not match:
        return 0
    return len([line for line in match.group(1).strip().split("\n") if line])


def derive_runs(map_dir: Path) -> tuple[MapRunInfo, ...]:
    """Summaries of every `run-<n>` directory, ordered by run number."""
    return tuple(
        MapRunInfo(
            run=number,
            is_complete=file_exists(run_path / "map.md"),
            file_count=count_topology_files(run_path / "topology.md"),
        )
        for number, run_path in numbered_dirs(map_dir / RUNS_DIR, RUN_PREFIX)
    )


class MapProgressStrategy:
    """Progress strategy for the map workflow."""

    workflow_type = WorkflowType.MAP
    phases = MAP_PHASES
    total_phases = 6

    def parse_state(
        self,
        session_path: Path,
        preserved_start_time: int | None = None,
    ) -> MapWorkflowState | None:
        state = load_state_json(session_path)
        if state is None:
            return None
        if state.workflow_type is not None and state.workflow_type != WorkflowType.MAP:
            logger.debug(
                "Session %s declares workflow %s, not map",
                session_path.name,
                state.workflow_type.value,
            )
            return None
        return self._parse_from_state_json(state, session_path, preserved_start_time)

    def _parse_from_state_json(
        self,
        state: StateJson,
        session_path: Path,
        preserved_start_time: int | None,
    ) -> MapWorkflowState:
        # started_at may belong to an earlier review workflow in the same session
        if preserved_start_time is not None:
            start_time = preserved_start_time
        else:
            start_time = (
                parse_timestamp_ms(state.map_started_at)
                or parse_timestamp_ms(state.started_at)
                or now_ms()
            )

        map_dir = session_path / MAP_DIR
        runs = derive_runs(map_dir)

        highest_existing = max((r.run for r in runs), default=1)
        current_run = max(1, min(state.current_map_run or 1, highest_existing))
        run_dir = map_dir / RUNS_DIR / f"{RUN_PREFIX}{current_run}"

        context_complete = file_exists(session_path / "discovered-standards.md")
        topology_complete = file_exists(run_dir / "topology.md")
        flow_analysis_complete = file_exists(run_dir / "flow-analysis.md")
        requirements_mapping_complete = file_exists(run_dir / "requirements-mapping.md")
        synthesis_complete = file_exists(run_dir / "map.md")
        has_requirements = file_exists(session_path / "requirements.md")

        # Individual analysts don't leave separate files; report the group
        flow_analysts = (
            (AgentStatus("flow-analyst", "Flow Analysts", PhaseStatus.COMPLETE),)
            if flow_analysis_complete
            else ()
        )
        requirements_mappers = (
            (AgentStatus("req-mapper", "Requirements Mappers", PhaseStatus.COMPLETE),)
            if requirements_mapping_complete and has_requirements
            else ()
        )

        return MapWorkflowState(
            session=session_path.name,
            phase=state.current_phase,
            phase_number=state.phase_number,
            total_phases=self.total_phases,
            start_time=start_time,
            complete=state.current_phase == "complete",
            context_complete=context_complete,
            topology_complete=topology_complete,
            flow_analysis_complete=flow_analysis_complete,
            requirements_mapping_complete=requirements_mapping_complete,
            synthesis_complete=synthesis_complete,
            current_run=current_run,
            runs=runs,
            flow_analysts=flow_analysts,
            requirements_mappers=requirements_mappers,
            has_requirements=has_requirements,
        )

    def render(self, state: MapWorkflowState, now: int | None = None) -> list[str]:
        lines: list[str] = ["", MAP_TITLE, ""]

        elapsed = max(0, (now if now is not None else now_ms()) - state.start_time)
        run_info = (
            f"[ocr.accent] Run {state.current_run}[/][ocr.dim]  ·  [/]"
            if state.current_run > 1
            else ""
        )
        lines.append(
            f"  [ocr.text]{escape(state.session)}[/][ocr.dim]  ·  [/]"
            f"{run_info}[ocr.text]{format_duration(elapsed)}[/]"
        )
        lines.append("")

        current_run = next((r for r in state.runs if r.run == state.current_run), None)
        if current_run is not None and current_run.file_count > 0:
            lines.append(
                f"  [ocr.text]{current_run.file_count} files[/][ocr.dim] in changeset[/]"
            )
            lines.append("")

        progress_phases = self.total_phases if state.complete else state.phase_number
        current = next((p for p in self.phases if p.key == state.phase), None)
        label = "Done" if state.complete else (current.label if current else None)
        lines.append(f"  {render_progress_bar(progress_phases, self.total_phases, label)}")
        lines.append("")

        completion = {
            "map-context": state.context_complete,
            "topology": state.topology_complete,
            "flow-analysis": state.flow_analysis_complete,
            "requirements-mapping": state.requirements_mapping_complete,
            "synthesis": state.synthesis_complete,
            "complete": state.complete,
        }
        agents = {
            "flow-analysis": state.flow_analysts,
            "requirements-mapping": state.requirements_mappers,
        }

        for phase in self.phases:
            if phase.key == "requirements-mapping" and not state.has_requirements:
                continue

            is_complete = completion.get(phase.key, False)
            is_current = state.phase == phase.key and not state.complete
            lines.append(
                f"  {phase_glyph(is_complete, is_current)} "
                f"{phase_label(phase.label, is_complete, is_current)}"
            )

            phase_agents = agents.get(phase.key, ())
            if phase_agents:
                lines.append(
                    "    "
                    + SEPARATOR.join(
                        f"{agent_glyph(a.status == PhaseStatus.COMPLETE)} "
                        f"[ocr.dim]{escape(a.display_name)}[/]"
                        for a in phase_agents
                    )
                )

        lines.append("")

        if state.complete:
            lines.append(f"[ocr.success]  {GLYPH_DONE} Map Complete[/]")
            lines.append(
                f"    [ocr.dim]→ [/][ocr.text].ocr/sessions/{escape(state.session)}/"
                f"map/runs/run-{state.current_run}/map.md[/]"
            )
        else:
            lines.append(EXIT_HINT)
        lines.append("")
        return lines

    def render_waiting(self) -> list[str]:
        return [
            "",
            MAP_TITLE,
            "",
            WAITING_MESSAGE,
            "",
            f"  {render_empty_bar()}",
            "",
            "  [ocr.dim]Run [/][ocr.text]/ocr-map[/][ocr.dim] to start[/]",
            "",
            EXIT_HINT,
            "",
        ]


map_strategy = MapProgressStrategy()
