"""Ports - interfaces/protocols for external dependencies."""

from .cipher import Cipher
from .editor import EditResult, Editor
from .entry_repo import EntryRepository

__all__ = [
    "Cipher",
    "EditResult",
    "Editor",
    "EntryRepository",
]
