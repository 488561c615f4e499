"""Workflow progress strategy protocol and registry.

Each workflow (review, map) provides a strategy: a fixed phase table plus
deterministic state derivation from filesystem artifacts and rendering of
that state to frame lines.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from ocr.progress.types import PhaseInfo, WorkflowState, WorkflowType


@runtime_checkable
class WorkflowProgressStrategy(Protocol):
    """Behavior bundle for one workflow type."""

    @property
    def workflow_type(self) -> WorkflowType: ...

    @property
    def phases(self) -> tuple[PhaseInfo, ...]: ...

    @property
    def total_phases(self) -> int: ...

    def parse_state(
        self,
        session_path: Path,
        preserved_start_time: int | None = None,
    ) -> WorkflowState | None:
        """Derive state from the session's artifacts.

        Args:
            session_path: Path to the session directory
            preserved_start_time: Start time (epoch ms) to keep across re-parses

        Returns:
            Workflow state, or None if there is no usable state.json.
        """
        ...

    def render(self, state: WorkflowState, now: int | None = None) -> list[str]:
        """Frame lines for a parsed state, with elapsed time measured to now (epoch ms)."""
        ...

    def render_waiting(self) -> list[str]:
        """Frame lines shown before any state exists."""
        ...


_strategies: dict[WorkflowType, WorkflowProgressStrategy] = {}


def register_strategy(strategy: WorkflowProgressStrategy) -> None:
    _strategies[strategy.workflow_type] = strategy


def get_strategy(workflow_type: WorkflowType) -> WorkflowProgressStrategy | None:
    return _strategies.get(workflow_type)


def get_all_strategies() -> list[WorkflowProgressStrategy]:
    return list(_strategies.values())
