"""Entry repository interface."""

from typing import Protocol


class EntryRepository(Protocol):
    """Interface for the version-controlled store of encrypted entries."""

    def init(
        self,
        user_name: str,
        user_email: str,
        initial_files: dict[str, bytes] | None = None,
    ) -> None:
        """Create the repository with initial_files committed, or not at all."""
        ...

    def is_initialized(self) -> bool:
        """Check if the repository exists."""
        ...

    def write_and_commit(self, relative_path: str, data: bytes, message: str) -> None:
        """Write a file and commit it, or leave no trace on failure."""
        ...

    def remove_and_commit(self, relative_path: str, message: str) -> None:
        """Remove a tracked file and commit the removal."""
        ...

    def read_tracked(self, relative_path: str) -> bytes:
        """Read the committed contents of a tracked file."""
        ...

    def tracked_files(self) -> set[str]:
        """All tracked file paths."""
        ...

    def list_entries(self) -> list[str]:
        """Entry names in the order they were committed."""
        ...
