"""Callout CSS snippet of a vault."""

import logging
import subprocess
from pathlib import Path

from obsvault.core.errors import EditorError, VaultFileError

logger = logging.getLogger(__name__)

SNIPPET_RELATIVE_PATH = Path("snippets") / "snippet.css"
SNIPPET_PLACEHOLDER = "/* Add your callout styles here */\n"


def snippet_path(obsidian_dir: Path) -> Path:
    return Path(obsidian_dir) / SNIPPET_RELATIVE_PATH


def ensure_snippet(obsidian_dir: Path) -> tuple[Path, bool]:
    """Make sure the callout snippet exists.

    Returns:
        (path, created) - created is True when the file was just written.
    """
    path = snippet_path(obsidian_dir)
    if path.exists():
        return path, False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(SNIPPET_PLACEHOLDER, encoding="utf-8")
    except OSError as e:
        raise VaultFileError(f"Failed to create callouts file: {e}") from e
    logger.debug(f"Created callouts file at {path}")
    return path, True


def open_in_editor(editor: str, path: Path) -> None:
    """Open path in editor, attached to the current terminal.

    Raises:
        EditorError: If the editor cannot be started or exits non-zero.
    """
    command = [editor, str(path)]
    logger.debug(f"Launching {command}")
    try:
        subprocess.run(command, check=True)
    except FileNotFoundError as e:
        raise EditorError(f"Editor not found: {editor}") from e
    except subprocess.CalledProcessError as e:
        raise EditorError(
            f"Failed to open editor: {editor} exited with status {e.returncode}"
        ) from e
