"""Unified async execution for CLI commands.

Provides a consistent pattern for running async code from Click commands
instead of scattered asyncio.run() calls.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run async code from a synchronous Click command.

    Args:
        coro: The coroutine to execute

    Returns:
        The result of the coroutine

    Raises:
        RuntimeError: If called from inside a running event loop.
        Any exception raised by the coroutine is propagated.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop - the normal case for CLI commands
        return asyncio.run(coro)
    coro.close()
    raise RuntimeError("run_async() cannot be called from a running event loop")
