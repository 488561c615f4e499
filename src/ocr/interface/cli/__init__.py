"""OCR command-line interface.

- core/ - entry point, theme, async runner, error handling
- commands/ - command implementations (*_cmd.py files)
"""

# Only export the main entry points - everything else should be imported directly
from ocr.interface.cli.core.main import cli_entrypoint, main

__all__ = ["cli_entrypoint", "main"]
