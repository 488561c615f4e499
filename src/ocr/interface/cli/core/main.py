"""Main CLI entry point.

    ocr progress                     Follow the newest active session
    ocr progress --session NAME      Follow one session
    ocr progress --workflow map      Force the map view
"""

import sys
from pathlib import Path

import click

from ocr import __version__
from ocr.foundation.config import load_config
from ocr.foundation.logging import configure_logging
from ocr.interface.cli.core.theme import create_ocr_console

console = create_ocr_console()


def cli_entrypoint() -> None:
    """Wrapped entrypoint with global error handling.

    Catches OcrError and displays it with recovery hints instead of a
    traceback. Called from pyproject.toml [project.scripts].
    """
    try:
        main(standalone_mode=False)
    except click.ClickException as e:
        # Let Click handle its own exceptions
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        console.print("\n  [ocr.dim]Stopped[/]")
        sys.exit(130)
    except Exception as e:
        from ocr.interface.cli.core.error_handler import handle_error

        handle_error(e)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging (also written to .ocr/logs/)")
@click.version_option(version=__version__, prog_name="ocr")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """Open Code Review: multi-agent code review for AI coding assistants.

    \b
    EXAMPLES:
        ocr progress
        ocr progress --workflow map
        ocr progress --session 2026-01-15-feature-login
    """
    config = load_config(root=Path.cwd())
    debug = debug or config.debug
    configure_logging(debug=debug, persist=debug)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


from ocr.interface.cli.commands import progress_cmd

main.add_command(progress_cmd.progress)
