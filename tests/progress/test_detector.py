"""Tests for workflow detection and session activity."""

from pathlib import Path

from ocr.progress.detector import (
    detect_active_workflows,
    detect_workflow_type,
    has_both_workflows_active,
    is_map_workflow,
    is_review_workflow,
    is_session_active,
)
from ocr.progress.types import WorkflowType


class TestDetectWorkflowType:
    """Priority: explicit > state.json > artifact directories."""

    def test_explicit_hint_wins(self, make_session) -> None:
        path = make_session(state={"workflow_type": "review"}, dirs=["rounds"])
        assert detect_workflow_type(path, WorkflowType.MAP) == WorkflowType.MAP

    def test_state_json_declaration(self, make_session) -> None:
        path = make_session(state={"workflow_type": "map"}, dirs=["rounds"])
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_map_dir_only(self, make_session) -> None:
        path = make_session(dirs=["map"])
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_rounds_dir_only(self, make_session) -> None:
        path = make_session(dirs=["rounds"])
        assert detect_workflow_type(path) == WorkflowType.REVIEW

    def test_both_dirs_with_map_phase(self, make_session) -> None:
        path = make_session(state={"current_phase": "topology"}, dirs=["rounds", "map"])
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_both_dirs_with_map_prefixed_phase(self, make_session) -> None:
        path = make_session(state={"current_phase": "map-context"}, dirs=["rounds", "map"])
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_both_dirs_with_review_phase(self, make_session) -> None:
        path = make_session(state={"current_phase": "reviews"}, dirs=["rounds", "map"])
        assert detect_workflow_type(path) == WorkflowType.REVIEW

    def test_no_evidence_defaults_to_review(self, make_session) -> None:
        assert detect_workflow_type(make_session()) == WorkflowType.REVIEW

    def test_invalid_state_json_falls_through_to_artifacts(self, make_session) -> None:
        path = make_session(dirs=["map"])
        (path / "state.json").write_text("{not json")
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_unknown_declared_type_is_ignored(self, make_session) -> None:
        path = make_session(state={"workflow_type": "audit"}, dirs=["map"])
        assert detect_workflow_type(path) == WorkflowType.MAP

    def test_convenience_predicates(self, make_session) -> None:
        map_session = make_session("2026-01-01-a", dirs=["map"])
        review_session = make_session("2026-01-01-b", dirs=["rounds"])

        assert is_map_workflow(map_session)
        assert not is_review_workflow(map_session)
        assert is_review_workflow(review_session)


class TestIsSessionActive:
    def test_missing_state_is_active(self, make_session) -> None:
        assert is_session_active(make_session())

    def test_closed_is_inactive(self, make_session) -> None:
        path = make_session(state={"status": "closed", "current_phase": "reviews"})
        assert not is_session_active(path)

    def test_complete_phase_is_inactive(self, make_session) -> None:
        path = make_session(state={"status": "active", "current_phase": "complete"})
        assert not is_session_active(path)

    def test_invalid_json_is_active(self, make_session) -> None:
        path = make_session()
        (path / "state.json").write_text("][")
        assert is_session_active(path)

    def test_in_progress_is_active(self, make_session) -> None:
        path = make_session(state={"status": "active", "current_phase": "reviews"})
        assert is_session_active(path)

    def test_missing_directory_is_active(self, tmp_path: Path) -> None:
        # Fails open, like a missing state.json
        assert is_session_active(tmp_path / "nope")


class TestDetectActiveWorkflows:
    def test_both_in_flight(self, make_session) -> None:
        path = make_session(dirs=["rounds/round-1", "map/runs/run-1"])

        assert detect_active_workflows(path) == {WorkflowType.REVIEW, WorkflowType.MAP}
        assert has_both_workflows_active(path)

    def test_finished_review_is_not_active(self, make_session) -> None:
        path = make_session(
            dirs=["map/runs/run-1"],
            files={"rounds/round-1/final.md": "# Final"},
        )

        assert detect_active_workflows(path) == {WorkflowType.MAP}
        assert not has_both_workflows_active(path)

    def test_latest_round_decides(self, make_session) -> None:
        path = make_session(
            files={"rounds/round-1/final.md": "# Final"},
            dirs=["rounds/round-2"],
        )
        assert detect_active_workflows(path) == {WorkflowType.REVIEW}

    def test_rounds_ordered_numerically(self, make_session) -> None:
        path = make_session(
            files={"rounds/round-10/final.md": "# Final"},
            dirs=["rounds/round-9"],
        )
        assert detect_active_workflows(path) == set()

    def test_empty_artifact_dir_counts_as_starting(self, make_session) -> None:
        path = make_session(dirs=["map"])
        assert detect_active_workflows(path) == {WorkflowType.MAP}

    def test_state_hint_without_artifacts(self, make_session) -> None:
        path = make_session(state={"workflow_type": "map", "current_phase": "map-context"})
        assert detect_active_workflows(path) == {WorkflowType.MAP}

    def test_completed_hint_without_artifacts(self, make_session) -> None:
        path = make_session(state={"workflow_type": "review", "current_phase": "complete"})
        assert detect_active_workflows(path) == set()

    def test_nothing(self, make_session) -> None:
        assert detect_active_workflows(make_session()) == set()
