"""Live progress tracking for OCR review and map sessions.

Progress is reconstructed from the files an external agent writes into
`.ocr/sessions/<session>/`; nothing here writes to a session.

- detector: which workflow(s) a session is running
- review_strategy / map_strategy: per-workflow parsing and rendering
- locator: newest active session
- watcher: the debounced live loop behind `ocr progress`
"""

from ocr.progress.detector import (
    detect_active_workflows,
    detect_workflow_type,
    has_both_workflows_active,
    is_map_workflow,
    is_review_workflow,
    is_session_active,
)
from ocr.progress.locator import find_latest_active_session
from ocr.progress.map_strategy import MapProgressStrategy, map_strategy
from ocr.progress.render_utils import TerminalRenderer
from ocr.progress.review_strategy import ReviewProgressStrategy, review_strategy
from ocr.progress.strategy import (
    WorkflowProgressStrategy,
    get_all_strategies,
    get_strategy,
    register_strategy,
)
from ocr.progress.types import (
    MapWorkflowState,
    PhaseInfo,
    ReviewWorkflowState,
    StateJson,
    WorkflowState,
    WorkflowType,
)
from ocr.progress.watcher import ProgressWatcher

register_strategy(review_strategy)
register_strategy(map_strategy)

__all__ = [
    # Types
    "WorkflowType",
    "WorkflowState",
    "ReviewWorkflowState",
    "MapWorkflowState",
    "StateJson",
    "PhaseInfo",
    # Strategies
    "WorkflowProgressStrategy",
    "ReviewProgressStrategy",
    "MapProgressStrategy",
    "review_strategy",
    "map_strategy",
    "register_strategy",
    "get_strategy",
    "get_all_strategies",
    # Detection
    "detect_workflow_type",
    "detect_active_workflows",
    "has_both_workflows_active",
    "is_session_active",
    "is_map_workflow",
    "is_review_workflow",
    "find_latest_active_session",
    # Live view
    "TerminalRenderer",
    "ProgressWatcher",
]
