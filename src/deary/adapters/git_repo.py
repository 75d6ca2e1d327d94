"""git adapter - subprocess wrapper for the entry repository."""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path, PurePosixPath

from deary.core.entry import Change
from deary.core.naming import is_entry_name
from deary.errors import (
    CommitFailed,
    ReadNotFound,
    RepoAlreadyExists,
    RepoInitFailed,
    RepoNotFound,
)

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """A git invocation exited non-zero or could not be started."""

    def __init__(self, args: list[str], returncode: int, stderr: str):
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {stderr}")


def _check_relative(relative_path: str) -> str:
    """Reject absolute paths and anything escaping the repository."""
    path = PurePosixPath(relative_path)
    if not relative_path or path.is_absolute() or ".." in path.parts or path.parts[:1] == (".git",):
        raise ReadNotFound(f"Invalid entry path: {relative_path!r}")
    return str(path)


class GitRepository:
    """
    git subprocess adapter.

    Implements EntryRepository protocol. Every mutation is one stage+commit
    limited to its own path, so a concurrent writer's staged file never lands
    in our commit. On failure the working tree and index are put back the way
    they were.
    """

    def __init__(self, path: Path | str, binary: str = "git", timeout: int = 60):
        self.path = Path(path).expanduser()
        self.binary = binary
        self.timeout = timeout

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = [self.binary, "-C", str(self.path), *args]
        logger.debug(f"Running git {' '.join(args)}")
        try:
            proc = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except FileNotFoundError:
            raise GitCommandError(list(args), 127, f"{self.binary} executable not found in PATH")
        except subprocess.TimeoutExpired:
            raise GitCommandError(list(args), -1, f"timed out after {self.timeout}s")
        if check and proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise GitCommandError(list(args), proc.returncode, stderr)
        return proc

    # ============== Lifecycle ==============

    def is_initialized(self) -> bool:
        """Check if the repository exists."""
        return (self.path / ".git").exists()

    def require(self) -> None:
        """Raise RepoNotFound unless the repository exists."""
        if not self.is_initialized():
            raise RepoNotFound(
                f"No diary repository at {self.path} (run 'deary init <key-id>' first)"
            )

    def init(
        self,
        user_name: str = "noname",
        user_email: str = "noemail",
        initial_files: dict[str, bytes] | None = None,
    ) -> None:
        """
        Create the repository with a local commit identity.

        Each of `initial_files` is committed as "Add <name>". If any step
        fails, the repository is removed again, so a later init can retry.
        """
        if self.is_initialized():
            raise RepoAlreadyExists(f"Repository {self.path} already exists")

        created = not self.path.exists()
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            self._git("init", "-q")
            self._git("config", "user.name", user_name)
            self._git("config", "user.email", user_email)
            for name, data in (initial_files or {}).items():
                self.write_and_commit(name, data, Change.ADD.message(name))
        except (OSError, GitCommandError, CommitFailed) as e:
            if created:
                shutil.rmtree(self.path, ignore_errors=True)
            else:
                shutil.rmtree(self.path / ".git", ignore_errors=True)
            raise RepoInitFailed(f"Could not initialize repository {self.path}: {e}") from e
        logger.info(f"Initialized repository {self.path}")

    # ============== Reading ==============

    def _has_commits(self) -> bool:
        return self._git("rev-parse", "--verify", "-q", "HEAD", check=False).returncode == 0

    def tracked_files(self) -> set[str]:
        """All tracked file paths."""
        self.require()
        out = self._git("ls-files", "-z").stdout.decode("utf-8", errors="surrogateescape")
        return {name for name in out.split("\0") if name}

    def read_tracked(self, relative_path: str) -> bytes:
        """Read the committed contents of a tracked file."""
        self.require()
        relative_path = _check_relative(relative_path)
        proc = self._git("cat-file", "blob", f"HEAD:{relative_path}", check=False)
        if proc.returncode != 0:
            raise ReadNotFound(f"No such entry: {relative_path}")
        return proc.stdout

    def list_entries(self) -> list[str]:
        """Tracked entry names in the order they were first committed."""
        self.require()
        if not self._has_commits():
            return []

        tracked = self.tracked_files()
        log = self._git(
            "-c", "core.quotePath=false",
            "log", "--reverse", "--diff-filter=A", "--name-only", "--format=",
        ).stdout.decode("utf-8", errors="surrogateescape")

        names = []
        seen = set()
        for line in log.splitlines():
            name = line.strip()
            if not name or name in seen:
                continue
            seen.add(name)
            if name in tracked and is_entry_name(name):
                names.append(name)
        return names

    # ============== Writing ==============

    def _write_file(self, target: Path, data: bytes) -> None:
        """Write data next to target, then rename over it."""
        fd, tmp_name = tempfile.mkstemp(prefix=".tmp-", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _in_head(self, relative_path: str) -> bool:
        return self._git("cat-file", "-e", f"HEAD:{relative_path}", check=False).returncode == 0

    def _rollback(self, relative_path: str, existed: bool) -> None:
        """Undo a half-done change to relative_path."""
        try:
            if existed or self._in_head(relative_path):
                self._git("reset", "-q", "HEAD", "--", relative_path, check=False)
                self._git("checkout", "-q", "HEAD", "--", relative_path)
            else:
                self._git("rm", "-q", "--cached", "--ignore-unmatch", "--", relative_path, check=False)
                (self.path / relative_path).unlink(missing_ok=True)
        except (OSError, GitCommandError) as e:
            logger.warning(f"Rollback of {relative_path} incomplete: {e}")

    def write_and_commit(self, relative_path: str, data: bytes, message: str) -> None:
        """Write a file and commit it, or leave no trace on failure."""
        self.require()
        relative_path = _check_relative(relative_path)
        existed = relative_path in self.tracked_files()
        target = self.path / relative_path

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            self._write_file(target, data)
            self._git("add", "--", relative_path)
            self._git("commit", "-q", "-m", message, "--", relative_path)
        except (OSError, GitCommandError) as e:
            self._rollback(relative_path, existed)
            raise CommitFailed(f"Could not commit {relative_path}: {e}") from e
        except BaseException:
            self._rollback(relative_path, existed)
            raise
        logger.info(f"Committed: {message}")

    def remove_and_commit(self, relative_path: str, message: str) -> None:
        """Remove a tracked file and commit the removal."""
        self.require()
        relative_path = _check_relative(relative_path)
        if relative_path not in self.tracked_files():
            raise ReadNotFound(f"No such entry: {relative_path}")

        try:
            self._git("rm", "-q", "--", relative_path)
            self._git("commit", "-q", "-m", message, "--", relative_path)
        except (OSError, GitCommandError) as e:
            self._rollback(relative_path, existed=True)
            raise CommitFailed(f"Could not commit removal of {relative_path}: {e}") from e
        logger.info(f"Committed: {message}")
