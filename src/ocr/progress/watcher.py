"""Live progress watch loop.

Two modes:

- Pinned (`--session NAME`): the session is resolved once up front and any
  problem is fatal. Afterwards the frame is refreshed on a timer and on
  filesystem changes inside the session.
- Auto-detect: the newest active session is re-resolved on every pass, new
  session directories are picked up as soon as they appear, and a combined
  view is shown while review and map run side by side.

All triggers (timer tick, session watcher, root watcher) go through one
trailing-edge debouncer. Rendering is synchronous, so passes never overlap.
"""

import asyncio
import logging
import signal
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from watchfiles import Change, DefaultFilter, awatch

from ocr.foundation.config import ProgressConfig
from ocr.foundation.errors import ErrorCode, session_error
from ocr.progress.artifacts import dir_exists, now_ms
from ocr.progress.debounce import Debouncer
from ocr.progress.detector import (
    detect_active_workflows,
    detect_workflow_type,
    is_session_active,
)
from ocr.progress.locator import find_latest_active_session
from ocr.progress.render_utils import TerminalRenderer
from ocr.progress.strategy import WorkflowProgressStrategy, get_strategy
from ocr.progress.types import WorkflowType
from ocr.progress.views import (
    COMBINED_PROGRESS,
    GENERIC_WAITING,
    render_combined_progress,
    render_generic_waiting,
)

logger = logging.getLogger(__name__)


class DepthFilter(DefaultFilter):
    """watchfiles filter that ignores entries nested deeper than max_depth.

    Depth 0 is a direct child of root; `map/runs/run-1/map.md` is depth 3.
    """

    def __init__(self, root: Path, max_depth: int) -> None:
        super().__init__()
        self.root = root.resolve()
        self.max_depth = max_depth

    def __call__(self, change: Change, path: str) -> bool:
        if not super().__call__(change, path):
            return False
        try:
            relative = Path(path).resolve().relative_to(self.root)
        except ValueError:
            return False
        return len(relative.parts) - 1 <= self.max_depth


@dataclass
class ProgressWatcher:
    """Drives the live progress view for one invocation of `ocr progress`.

    `refresh_auto()` and `resolve_pinned()` / `refresh_pinned()` are plain
    synchronous passes; `run()` wires them to the timer, the filesystem
    watchers and SIGINT.
    """

    target_dir: Path
    sessions_dir: Path
    workflow: WorkflowType | None = None
    session: str | None = None
    config: ProgressConfig = field(default_factory=ProgressConfig)
    renderer: TerminalRenderer = field(default_factory=TerminalRenderer)
    clock: Callable[[], int] = now_ms

    last_frame: tuple[str, list[str]] | None = field(default=None, init=False)
    current_session: str | None = field(default=None, init=False)
    session_path: Path | None = field(default=None, init=False)

    _strategy: WorkflowProgressStrategy | None = field(default=None, init=False, repr=False)
    _start_times: dict[WorkflowType, int | None] = field(
        default_factory=lambda: {kind: None for kind in WorkflowType}, init=False, repr=False
    )
    _stop: asyncio.Event | None = field(default=None, init=False, repr=False)
    _debouncer: Debouncer | None = field(default=None, init=False, repr=False)
    _session_watch: tuple[asyncio.Task[None], asyncio.Event] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def pinned(self) -> bool:
        return self.session is not None

    @property
    def start_times(self) -> dict[WorkflowType, int | None]:
        return dict(self._start_times)

    # -- synchronous passes -------------------------------------------------

    def resolve_pinned(self) -> None:
        """Resolve the named session and render its first frame.

        Raises:
            OcrError: SESSION_NOT_FOUND, WORKFLOW_UNDETERMINED or
                SESSION_STATE_MISSING.
        """
        if self.session is None:
            raise ValueError("resolve_pinned() needs a session name")
        session_path = self.sessions_dir / self.session
        if not dir_exists(session_path):
            raise session_error(ErrorCode.SESSION_NOT_FOUND, self.session)

        strategy = get_strategy(detect_workflow_type(session_path, self.workflow))
        if strategy is None:
            raise session_error(ErrorCode.WORKFLOW_UNDETERMINED, self.session)

        state = strategy.parse_state(session_path)
        if state is None:
            raise session_error(ErrorCode.SESSION_STATE_MISSING, self.session)

        self.current_session = self.session
        self.session_path = session_path
        self._strategy = strategy
        self._start_times[strategy.workflow_type] = state.start_time
        self._show(f"{strategy.workflow_type.value}-progress", strategy.render(state, now=self.clock()))

    def refresh_pinned(self) -> None:
        """Re-parse the pinned session; an unparseable pass keeps the last frame."""
        if self._strategy is None or self.session_path is None:
            return
        kind = self._strategy.workflow_type
        state = self._strategy.parse_state(self.session_path, self._start_times[kind])
        if state is not None:
            self._show(f"{kind.value}-progress", self._strategy.render(state, now=self.clock()))

    def refresh_auto(self) -> None:
        """One auto-detect pass: re-resolve the session, then render."""
        path = self.session_path
        if path is None or not dir_exists(path) or not is_session_active(path):
            latest = find_latest_active_session(self.sessions_dir)
            if latest and latest != self.current_session:
                self.switch_session(latest)
            elif not latest:
                self.current_session = None
                self.session_path = None
                self._reset_tracking()

        path = self.session_path
        if path is None or not dir_exists(path):
            self._reset_start_times()
            self._show(GENERIC_WAITING, render_generic_waiting())
            return

        if self.workflow is None and len(detect_active_workflows(path)) > 1:
            self._show(COMBINED_PROGRESS, render_combined_progress(path, self._start_times))
            return

        # Re-detect every pass: a fresh session has no artifacts yet
        detected = get_strategy(detect_workflow_type(path, self.workflow))
        if detected is None:
            self._strategy = None
            self._show(GENERIC_WAITING, render_generic_waiting())
            return
        if self._strategy is not None and self._strategy.workflow_type != detected.workflow_type:
            logger.debug(
                "Session %s is now %s", self.current_session, detected.workflow_type.value
            )
            self._start_times[detected.workflow_type] = None
        self._strategy = detected

        kind = self._strategy.workflow_type
        state = self._strategy.parse_state(path, self._start_times[kind])
        if state is None:
            self._show(f"{kind.value}-waiting", self._strategy.render_waiting())
            return
        if self._start_times[kind] is None:
            self._start_times[kind] = state.start_time
        self._show(f"{kind.value}-progress", self._strategy.render(state, now=self.clock()))

    def refresh(self) -> None:
        """Run one pass for the current mode, logging and dropping any error."""
        try:
            if self.pinned:
                self.refresh_pinned()
            else:
                self.refresh_auto()
        except Exception:
            logger.debug("Progress refresh failed", exc_info=True)

    def switch_session(self, name: str) -> None:
        """Follow a different session, forgetting everything about the old one."""
        logger.debug("Following session %s", name)
        self.current_session = name
        self.session_path = self.sessions_dir / name
        self._reset_tracking()
        self._attach_session_watcher(self.session_path)

    def _reset_start_times(self) -> None:
        for kind in self._start_times:
            self._start_times[kind] = None

    def _reset_tracking(self) -> None:
        self._reset_start_times()
        self._strategy = None

    def _show(self, render_type: str, lines: list[str]) -> None:
        self.last_frame = (render_type, lines)
        self.renderer.show(render_type, lines)

    # -- event loop -----------------------------------------------------------

    async def run(self) -> None:
        """Run until interrupted. Pinned-mode resolution errors propagate."""
        loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        self._debouncer = Debouncer(self.config.debounce_ms, self.refresh)

        if self.pinned:
            self.resolve_pinned()
        else:
            latest = find_latest_active_session(self.sessions_dir)
            if latest:
                self.current_session = latest
                self.session_path = self.sessions_dir / latest
            self.refresh_auto()

        interrupt_handled = self._install_interrupt_handler(loop)
        tasks = [asyncio.create_task(self._tick())]
        root_stop = asyncio.Event()
        if self.session_path is not None:
            self._attach_session_watcher(self.session_path)
        if not self.pinned:
            ocr_dir = self.sessions_dir.parent
            root = ocr_dir if dir_exists(ocr_dir) else self.target_dir
            tasks.append(
                asyncio.create_task(
                    self._watch_tree(
                        root,
                        self.config.root_watch_depth,
                        root_stop,
                        self._on_root_changes,
                    )
                )
            )

        try:
            await self._stop.wait()
        finally:
            self._debouncer.cancel()
            root_stop.set()
            session_task = self._detach_session_watcher()
            if session_task is not None:
                tasks.append(session_task)
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if interrupt_handled:
                loop.remove_signal_handler(signal.SIGINT)
            self.renderer.done()
            self._stop = None

    def stop(self) -> None:
        if self._stop is not None:
            self._stop.set()

    def trigger(self) -> None:
        """Request a debounced refresh."""
        if self._debouncer is not None:
            self._debouncer.trigger()

    def _install_interrupt_handler(self, loop: asyncio.AbstractEventLoop) -> bool:
        try:
            loop.add_signal_handler(signal.SIGINT, self.stop)
        except (NotImplementedError, RuntimeError):
            # No loop signal support (Windows); KeyboardInterrupt is handled by the caller
            return False
        return True

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.config.tick_seconds)
            self.trigger()

    def _attach_session_watcher(self, session_path: Path) -> None:
        if self._stop is None:
            return
        self._detach_session_watcher()
        stop_event = asyncio.Event()
        task = asyncio.create_task(
            self._watch_tree(
                session_path,
                self.config.session_watch_depth,
                stop_event,
                lambda _changes: self.trigger(),
            )
        )
        self._session_watch = (task, stop_event)

    def _detach_session_watcher(self) -> asyncio.Task[None] | None:
        if self._session_watch is None:
            return None
        task, stop_event = self._session_watch
        stop_event.set()
        task.cancel()
        self._session_watch = None
        return task

    async def _watch_tree(
        self,
        root: Path,
        depth: int,
        stop_event: asyncio.Event,
        on_changes: Callable[[Iterable[tuple[Change, str]]], None],
    ) -> None:
        debounce_ms = self.config.debounce_ms
        try:
            async for changes in awatch(
                root,
                watch_filter=DepthFilter(root, depth),
                stop_event=stop_event,
                debounce=debounce_ms,
                step=max(1, debounce_ms // 2),
            ):
                on_changes(changes)
        except OSError as e:
            # Session directory removed or unreadable; the timer keeps refreshing
            logger.debug("Stopped watching %s: %s", root, e)
        except Exception:
            logger.debug("Watcher for %s failed", root, exc_info=True)

    def _on_root_changes(self, changes: Iterable[tuple[Change, str]]) -> None:
        sessions_dir = self.sessions_dir.resolve()
        for change, raw_path in changes:
            path = Path(raw_path)
            if (
                change == Change.added
                and path.resolve().parent == sessions_dir
                and dir_exists(path)
            ):
                self.switch_session(path.name)
        self.trigger()
