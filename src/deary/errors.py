"""Error taxonomy for deary.

Every failure the entry workflow can surface is a DearyError subclass. The
CLI maps each kind to its own exit code.
"""


class DearyError(Exception):
    """Base class for all deary errors."""

    exit_code = 1


class ScratchUnavailable(DearyError):
    """Raised when the memory-backed scratch directory cannot be used."""

    exit_code = 10


class EditorLaunchFailed(DearyError):
    """Raised when the external editor cannot be started."""

    exit_code = 11


class EncryptionFailed(DearyError):
    """Raised when gpg cannot encrypt for the configured recipient."""

    exit_code = 12


class DecryptionFailed(DearyError):
    """Raised when gpg cannot decrypt an entry."""

    exit_code = 13


class CommitFailed(DearyError):
    """Raised when an entry cannot be staged or committed."""

    exit_code = 14


class RepoAlreadyExists(DearyError):
    """Raised by init when the target is already a repository."""

    exit_code = 15


class RepoInitFailed(DearyError):
    """Raised when the repository cannot be created."""

    exit_code = 16


class ReadNotFound(DearyError):
    """Raised when an entry is not tracked in the repository."""

    exit_code = 17


class RepoNotFound(DearyError):
    """Raised when the diary repository has not been initialized."""

    exit_code = 18


class EmptyEntry(DearyError):
    """The editor left the entry empty. Nothing was saved."""

    exit_code = 0


class EntryUnchanged(DearyError):
    """The edited entry is identical to the committed one. Nothing was saved."""

    exit_code = 0
