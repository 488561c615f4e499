"""Workflow type detection.

Deterministically detects which workflow is active in a session.
Priority order:
1. Explicit hint (the --workflow flag)
2. state.json workflow_type field
3. Filesystem artifact detection (map/ vs rounds/)

Nothing in this module raises on bad input; unreadable artifacts simply
fall through to the next priority level.
"""

from pathlib import Path

from ocr.progress.artifacts import (
    MAP_DIR,
    ROUND_PREFIX,
    ROUNDS_DIR,
    RUN_PREFIX,
    RUNS_DIR,
    dir_exists,
    file_exists,
    load_state_json,
    numbered_dirs,
)
from ocr.progress.types import SessionStatus, WorkflowType

# Phase names that belong to the map workflow when both artifact trees exist
MAP_PHASE_PREFIX = "map-"
MAP_PHASE_NAMES = frozenset({"topology", "flow-analysis", "requirements-mapping"})

COMPLETE_PHASE = "complete"


def is_map_phase(phase: str) -> bool:
    return phase.startswith(MAP_PHASE_PREFIX) or phase in MAP_PHASE_NAMES


def detect_workflow_type(
    session_path: Path,
    explicit: WorkflowType | None = None,
) -> WorkflowType | None:
    """Detect the workflow type for a session directory.

    Args:
        session_path: Path to the session directory
        explicit: Optional explicit type from the CLI flag

    Returns:
        Detected workflow type. Falls back to review when there is no
        evidence at all, since that is the most common workflow and
        detection corrects itself once artifacts appear.
    """
    if explicit is not None:
        return explicit

    state = load_state_json(session_path)
    if state is not None and state.workflow_type is not None:
        return state.workflow_type

    has_map_dir = dir_exists(session_path / MAP_DIR)
    has_rounds_dir = dir_exists(session_path / ROUNDS_DIR)

    if has_map_dir and not has_rounds_dir:
        return WorkflowType.MAP
    if has_rounds_dir and not has_map_dir:
        return WorkflowType.REVIEW

    if has_map_dir and has_rounds_dir:
        # Unusual: both workflows ran in one session. Side with the phase
        # the agent last reported.
        if state is not None and is_map_phase(state.current_phase):
            return WorkflowType.MAP
        return WorkflowType.REVIEW

    return WorkflowType.REVIEW


def is_session_active(session_path: Path) -> bool:
    """Check if a session is active (not closed or complete).

    Fails open: a missing or unreadable state.json counts as active so a
    session being bootstrapped never vanishes from view.
    """
    state = load_state_json(session_path)
    if state is None:
        return True
    return not (state.status == SessionStatus.CLOSED or state.current_phase == COMPLETE_PHASE)


def is_map_workflow(session_path: Path) -> bool:
    return detect_workflow_type(session_path) == WorkflowType.MAP


def is_review_workflow(session_path: Path) -> bool:
    return detect_workflow_type(session_path) == WorkflowType.REVIEW


def _latest_unit_incomplete(parent: Path, prefix: str, marker: str) -> bool:
    units = numbered_dirs(parent, prefix)
    if not units:
        # Artifact dir exists but no rounds/runs yet: the workflow is starting
        return True
    _, latest = units[-1]
    return not file_exists(latest / marker)


def detect_active_workflows(session_path: Path) -> set[WorkflowType]:
    """Detect every workflow that is currently in flight in a session.

    A workflow is active when its artifact directory exists and its latest
    round/run has no completion marker yet (final.md / map.md). With no
    artifact directories at all, the state.json hint is used instead.
    """
    active: set[WorkflowType] = set()

    rounds_dir = session_path / ROUNDS_DIR
    map_dir = session_path / MAP_DIR
    has_rounds_dir = dir_exists(rounds_dir)
    has_map_dir = dir_exists(map_dir)

    if has_rounds_dir and _latest_unit_incomplete(rounds_dir, ROUND_PREFIX, "final.md"):
        active.add(WorkflowType.REVIEW)

    if has_map_dir and _latest_unit_incomplete(map_dir / RUNS_DIR, RUN_PREFIX, "map.md"):
        active.add(WorkflowType.MAP)

    if not has_rounds_dir and not has_map_dir:
        state = load_state_json(session_path)
        if (
            state is not None
            and state.workflow_type is not None
            and state.current_phase != COMPLETE_PHASE
        ):
            active.add(state.workflow_type)

    return active


def has_both_workflows_active(session_path: Path) -> bool:
    """Check if review and map workflows are running simultaneously."""
    return detect_active_workflows(session_path) >= {WorkflowType.REVIEW, WorkflowType.MAP}
