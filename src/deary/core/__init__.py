"""Functional core - pure domain logic with no I/O."""

from .entry import Change, Entry
from .naming import entry_name, is_entry_name, unique_entry_name

__all__ = [
    "Change",
    "Entry",
    "entry_name",
    "is_entry_name",
    "unique_entry_name",
]
