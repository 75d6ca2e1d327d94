"""Memory-backed scratch files for plaintext while an entry is being written."""

import logging
import os
import re
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from deary.errors import ScratchUnavailable

logger = logging.getLogger(__name__)

MEMORY_FILESYSTEMS = {"tmpfs", "ramfs"}
PROC_MOUNTS = Path("/proc/mounts")

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


@dataclass
class ScratchFile:
    """A private plaintext file that lives only for one operation."""

    path: Path

    def read(self) -> bytes:
        return self.path.read_bytes()

    def write(self, data: bytes) -> None:
        with open(self.path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())


def _filesystem_type(directory: Path, mounts_file: Path = PROC_MOUNTS) -> str | None:
    """Filesystem type of the mount holding `directory`, from /proc/mounts."""
    try:
        lines = mounts_file.read_text().splitlines()
    except OSError:
        return None

    target = str(directory)
    best_mount, best_type = "", None
    for line in lines:
        parts = line.split()
        if len(parts) < 3:
            continue
        mount_point = _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), parts[1])
        inside = target == mount_point or target.startswith(mount_point.rstrip("/") + "/")
        # Later mounts on the same point shadow earlier ones
        if inside and len(mount_point) >= len(best_mount):
            best_mount, best_type = mount_point, parts[2]
    return best_type


class ScratchArea:
    """
    Scratch area on a memory-backed filesystem.

    Plaintext must never touch persistent storage, so there is no fallback
    to a disk-backed temp directory: an unusable directory is an error.
    """

    def __init__(
        self,
        directory: Path | str = "/dev/shm",
        require_memory_backed: bool = True,
        prefix: str = "deary-",
    ):
        self.directory = Path(directory)
        self.require_memory_backed = require_memory_backed
        self.prefix = prefix

    def check(self) -> None:
        """Raise ScratchUnavailable unless plaintext can be staged here."""
        if not self.directory.is_dir():
            raise ScratchUnavailable(
                f"Scratch directory {self.directory} does not exist "
                "(a memory-backed filesystem such as /dev/shm is required)"
            )
        if not os.access(self.directory, os.W_OK | os.X_OK):
            raise ScratchUnavailable(f"Scratch directory {self.directory} is not writable")
        if self.require_memory_backed:
            fs_type = _filesystem_type(self.directory.resolve())
            if fs_type not in MEMORY_FILESYSTEMS:
                raise ScratchUnavailable(
                    f"Scratch directory {self.directory} is not memory-backed "
                    f"(filesystem: {fs_type or 'unknown'})"
                )

    def acquire(self) -> ScratchFile:
        """Create a new, empty, owner-only scratch file."""
        self.check()
        try:
            # mkstemp opens with O_EXCL and mode 0600, with a random suffix
            fd, name = tempfile.mkstemp(prefix=self.prefix, dir=self.directory)
        except OSError as e:
            raise ScratchUnavailable(f"Cannot create scratch file in {self.directory}: {e}") from e
        os.close(fd)
        logger.debug(f"Acquired scratch file {name}")
        return ScratchFile(Path(name))

    def release(self, scratch: ScratchFile) -> None:
        """Overwrite the scratch file with zeros, then unlink it."""
        path = scratch.path
        try:
            size = path.stat().st_size
            with open(path, "r+b") as f:
                f.write(b"\0" * size)
                f.flush()
                os.fsync(f.fileno())
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Could not overwrite scratch file {path}: {e}")

        try:
            path.unlink()
        except FileNotFoundError:
            pass
        logger.debug(f"Released scratch file {path}")

    @contextmanager
    def session(self, initial: bytes = b"") -> Iterator[ScratchFile]:
        """Acquire a scratch file, seed it, and release it on every exit path."""
        scratch = self.acquire()
        try:
            if initial:
                scratch.write(initial)
            yield scratch
        finally:
            self.release(scratch)
