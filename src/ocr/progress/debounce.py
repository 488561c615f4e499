"""Trailing-edge debouncing for filesystem event bursts."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Debouncer:
    """Run a callback once a burst of triggers has gone quiet.

    Every `trigger()` restarts the delay; the callback fires once, `delay_ms`
    after the last trigger of a burst. Must be used from inside a running
    event loop.

    Example:
        >>> debouncer = Debouncer(50, viewer.refresh)
        >>> debouncer.trigger()  # x10 within 50ms -> one refresh
    """

    delay_ms: int
    callback: Callable[[], None]
    fire_count: int = field(default=0, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    def trigger(self) -> None:
        """Schedule the callback, replacing any pending schedule."""
        self.cancel()
        self._task = asyncio.create_task(self._fire_later())

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        self._task = None
        self.fire_count += 1
        self.callback()
