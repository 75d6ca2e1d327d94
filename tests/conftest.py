"""In-memory fakes for the gpg, git and editor ports."""

from pathlib import Path

import pytest

from deary.adapters.scratch import ScratchArea
from deary.config import Config
from deary.core.naming import is_entry_name
from deary.errors import (
    CommitFailed,
    DecryptionFailed,
    EncryptionFailed,
    ReadNotFound,
    RepoAlreadyExists,
    RepoInitFailed,
    RepoNotFound,
)
from deary.ports.editor import EditResult
from deary.workflows import Diary


class FakeCipher:
    """Reversible stand-in for gpg: ciphertext is tagged with the recipient."""

    def __init__(self):
        self.fail_encrypt = False
        self.fail_decrypt = False
        self.encrypted: list[tuple[str, bytes]] = []

    def encrypt(self, recipient: str, plaintext: bytes) -> bytes:
        if self.fail_encrypt:
            raise EncryptionFailed(f"No public key for {recipient}")
        self.encrypted.append((recipient, plaintext))
        return b"ENC:" + recipient.encode() + b":" + plaintext[::-1]

    def decrypt(self, ciphertext: bytes) -> bytes:
        if self.fail_decrypt or not ciphertext.startswith(b"ENC:"):
            raise DecryptionFailed("Decryption failed: no secret key")
        _, _, body = ciphertext[4:].partition(b":")
        return body[::-1]


class FakeRepository:
    """Dict-backed repository that records commits in order."""

    def __init__(self):
        self.initialized = False
        self.files: dict[str, bytes] = {}
        self.commits: list[str] = []
        self.order: list[str] = []
        self.fail_commit = False

    def init(self, user_name: str, user_email: str, initial_files=None) -> None:
        if self.initialized:
            raise RepoAlreadyExists("Repository already exists")
        self.initialized = True
        try:
            for name, data in (initial_files or {}).items():
                self.write_and_commit(name, data, f"Add {name}")
        except CommitFailed as e:
            self.initialized = False
            self.files.clear()
            self.order.clear()
            self.commits.clear()
            raise RepoInitFailed(str(e)) from e

    def is_initialized(self) -> bool:
        return self.initialized

    def _require(self):
        if not self.initialized:
            raise RepoNotFound("No diary repository")

    def write_and_commit(self, relative_path: str, data: bytes, message: str) -> None:
        self._require()
        if self.fail_commit:
            raise CommitFailed(f"Could not commit {relative_path}")
        if relative_path not in self.files:
            self.order.append(relative_path)
        self.files[relative_path] = data
        self.commits.append(message)

    def remove_and_commit(self, relative_path: str, message: str) -> None:
        self._require()
        if relative_path not in self.files:
            raise ReadNotFound(f"No such entry: {relative_path}")
        del self.files[relative_path]
        self.order.remove(relative_path)
        self.commits.append(message)

    def read_tracked(self, relative_path: str) -> bytes:
        self._require()
        try:
            return self.files[relative_path]
        except KeyError:
            raise ReadNotFound(f"No such entry: {relative_path}")

    def tracked_files(self) -> set[str]:
        self._require()
        return set(self.files)

    def list_entries(self) -> list[str]:
        self._require()
        return [name for name in self.order if is_entry_name(name)]


class FakeEditor:
    """Editor that writes preset content and remembers what it was shown."""

    def __init__(self, content: bytes = b"", exit_code: int = 0, error: Exception | None = None):
        self.content = content
        self.exit_code = exit_code
        self.error = error
        self.seen: list[bytes] = []
        self.paths: list[Path] = []

    def edit(self, path: Path) -> EditResult:
        self.paths.append(Path(path))
        self.seen.append(Path(path).read_bytes())
        if self.error:
            raise self.error
        Path(path).write_bytes(self.content)
        return EditResult(content=Path(path).read_bytes(), exit_code=self.exit_code)


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "shm"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, scratch_dir):
    return Config(
        repo_dir=tmp_path / "diary",
        scratch_dir=scratch_dir,
        require_memory_scratch=False,
    )


@pytest.fixture
def cipher():
    return FakeCipher()


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def diary(config, cipher, repository, editor, scratch_dir):
    return Diary(
        config=config,
        cipher=cipher,
        repository=repository,
        editor=editor,
        scratch=ScratchArea(scratch_dir, require_memory_backed=False),
    )
