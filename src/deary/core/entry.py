"""Entry domain model."""

from dataclasses import dataclass
from enum import Enum


class Change(Enum):
    """Kind of repository change, used for commit messages."""

    ADD = "Add"
    EDIT = "Edit"
    DELETE = "Delete"

    def message(self, name: str) -> str:
        return f"{self.value} {name}"


@dataclass
class Entry:
    """A committed diary entry. Only ciphertext is ever held here."""

    name: str
    ciphertext: bytes
