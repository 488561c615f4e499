"""Progress tracking types shared across workflow strategies.

Everything here is plain data. Workflow states are derived fresh from the
filesystem on every poll and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WorkflowType(str, Enum):
    """Supported high-level workflows."""

    REVIEW = "review"
    MAP = "map"


class PhaseStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class PhaseInfo:
    """One row of a strategy's fixed phase table."""

    key: str
    label: str


# =============================================================================
# Persisted status record (written by the external agent, read-only here)
# =============================================================================


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _opt_enum(enum_cls: type[Enum], value: Any) -> Any:
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True, slots=True)
class StateJson:
    """The `state.json` status record.

    Treated as a hint: completion flags are cross-checked against artifacts.
    """

    session_id: str
    current_phase: str
    phase_number: int
    status: SessionStatus | None = None
    workflow_type: WorkflowType | None = None
    started_at: str | None = None
    updated_at: str | None = None
    # Review-specific
    current_round: int | None = None
    round_started_at: str | None = None
    # Map-specific
    current_map_run: int | None = None
    map_started_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StateJson":
        """Build from decoded JSON, dropping fields of the wrong type."""
        return cls(
            session_id=str(data.get("session_id") or ""),
            current_phase=str(data.get("current_phase") or ""),
            phase_number=_opt_int(data.get("phase_number")) or 0,
            status=_opt_enum(SessionStatus, data.get("status")),
            workflow_type=_opt_enum(WorkflowType, data.get("workflow_type")),
            started_at=_opt_str(data.get("started_at")),
            updated_at=_opt_str(data.get("updated_at")),
            current_round=_opt_int(data.get("current_round")),
            round_started_at=_opt_str(data.get("round_started_at")),
            current_map_run=_opt_int(data.get("current_map_run")),
            map_started_at=_opt_str(data.get("map_started_at")),
        )


# =============================================================================
# Derived workflow state
# =============================================================================


@dataclass(frozen=True, slots=True)
class RoundInfo:
    round: int
    is_complete: bool
    reviewers: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReviewerStatus:
    name: str
    display_name: str
    status: PhaseStatus
    findings: int


@dataclass(frozen=True, slots=True)
class MapRunInfo:
    run: int
    is_complete: bool
    file_count: int


@dataclass(frozen=True, slots=True)
class AgentStatus:
    name: str
    display_name: str
    status: PhaseStatus


@dataclass(frozen=True, slots=True)
class ReviewWorkflowState:
    """Derived progress of the 8-phase review workflow."""

    session: str
    phase: str
    phase_number: int
    total_phases: int
    start_time: int
    """Milliseconds since the epoch."""
    complete: bool
    # Phase completion flags (derived from filesystem)
    context_complete: bool
    change_context_complete: bool
    analysis_complete: bool
    reviews_complete: bool
    aggregation_complete: bool
    discourse_complete: bool
    synthesis_complete: bool
    current_round: int
    rounds: tuple[RoundInfo, ...] = ()
    reviewers: tuple[ReviewerStatus, ...] = ()
    workflow_type: WorkflowType = field(default=WorkflowType.REVIEW, init=False)


@dataclass(frozen=True, slots=True)
class MapWorkflowState:
    """Derived progress of the 6-phase map workflow."""

    session: str
    phase: str
    phase_number: int
    total_phases: int
    start_time: int
    """Milliseconds since the epoch."""
    complete: bool
    # Phase completion flags (derived from filesystem)
    context_complete: bool
    topology_complete: bool
    flow_analysis_complete: bool
    requirements_mapping_complete: bool
    synthesis_complete: bool
    current_run: int
    runs: tuple[MapRunInfo, ...] = ()
    flow_analysts: tuple[AgentStatus, ...] = ()
    requirements_mappers: tuple[AgentStatus, ...] = ()
    has_requirements: bool = False
    workflow_type: WorkflowType = field(default=WorkflowType.MAP, init=False)


WorkflowState = ReviewWorkflowState | MapWorkflowState
