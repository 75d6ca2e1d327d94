"""External editor adapter - interactive subprocess."""

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path

from deary.errors import EditorLaunchFailed
from deary.ports.editor import EditResult

logger = logging.getLogger(__name__)

FALLBACK_EDITOR = "vim"


def find_editor(configured: str | None = None) -> list[str]:
    """
    Resolve the editor command line.

    Order: configured command, $VISUAL, $EDITOR, then vim from PATH.
    """
    for candidate in (configured, os.environ.get("VISUAL"), os.environ.get("EDITOR")):
        if candidate and candidate.strip():
            return shlex.split(candidate)

    vim = shutil.which(FALLBACK_EDITOR)
    if vim:
        return [vim]
    raise EditorLaunchFailed(f"EDITOR is not set, and {FALLBACK_EDITOR} not found in PATH")


class ExternalEditor:
    """
    Editor subprocess adapter.

    Implements Editor protocol. Runs in the foreground on the caller's
    terminal and waits for the user to quit.
    """

    def __init__(self, command: str | None = None):
        self.command = command

    def edit(self, path: Path) -> EditResult:
        """Open path in the editor and return what is in it afterwards."""
        cmd = find_editor(self.command) + [str(path)]
        logger.debug(f"Launching editor: {cmd[0]}")
        try:
            proc = subprocess.run(cmd)
        except FileNotFoundError:
            raise EditorLaunchFailed(f"Editor not found: {cmd[0]}")
        except PermissionError:
            raise EditorLaunchFailed(f"Editor is not executable: {cmd[0]}")
        except OSError as e:
            raise EditorLaunchFailed(f"Could not start editor {cmd[0]}: {e}")

        # The user may have saved before the editor failed, so keep going
        if proc.returncode != 0:
            logger.warning(f"Editor exited with status {proc.returncode}")

        try:
            content = Path(path).read_bytes()
        except FileNotFoundError:
            content = b""
        return EditResult(content=content, exit_code=proc.returncode)
