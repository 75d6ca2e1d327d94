"""Text editor interface."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass
class EditResult:
    """What the editor left behind."""

    content: bytes
    exit_code: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()


class Editor(Protocol):
    """Interface for interactive editing of a file."""

    def edit(self, path: Path) -> EditResult:
        """Open path in the editor and block until it exits."""
        ...
