"""Live progress view for review and map sessions.

Examples:
    ocr progress                          # Follow the newest active session
    ocr progress --workflow review        # Ignore a parallel map run
    ocr progress -s 2026-01-15-main       # Pin one session
"""

import logging
from pathlib import Path

import click

from ocr.foundation.config import OcrConfig, get_config
from ocr.foundation.guards import ensure_sessions_dir, require_setup
from ocr.interface.cli.core.async_runner import run_async
from ocr.progress import ProgressWatcher, WorkflowType

logger = logging.getLogger(__name__)


@click.command()
@click.option("--session", "-s", default=None, help="Track a specific session by name")
@click.option(
    "--workflow",
    "-w",
    type=click.Choice([kind.value for kind in WorkflowType]),
    default=None,
    help="Workflow to display (default: auto-detect)",
)
@click.pass_context
def progress(ctx: click.Context, session: str | None, workflow: str | None) -> None:
    """Watch real-time progress of a code review or map session.

    Without --session, follows the newest active session and switches to new
    sessions as they appear. When review and map run side by side, shows a
    compact view of both unless --workflow picks one.

    \b
    Press Ctrl+C to exit; the last frame stays on screen.
    """
    target_dir = Path.cwd()
    require_setup(target_dir)
    sessions_dir = ensure_sessions_dir(target_dir)

    config: OcrConfig = (ctx.obj or {}).get("config") or get_config()
    watcher = ProgressWatcher(
        target_dir=target_dir,
        sessions_dir=sessions_dir,
        workflow=WorkflowType(workflow) if workflow else None,
        session=session,
        config=config.progress,
    )
    logger.debug("Starting progress view (session=%s, workflow=%s)", session, workflow)

    try:
        run_async(watcher.run())
    except KeyboardInterrupt:
        # Event loops without signal handler support deliver Ctrl+C here
        watcher.renderer.done()
