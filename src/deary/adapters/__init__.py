"""Adapters - I/O implementations of ports."""

from .editor import ExternalEditor
from .git_repo import GitRepository
from .gpg import GpgCipher
from .scratch import ScratchArea, ScratchFile

__all__ = [
    "ExternalEditor",
    "GitRepository",
    "GpgCipher",
    "ScratchArea",
    "ScratchFile",
]
