"""Entry workflows shared by the CLI.

Each operation composes the adapters: scratch file, editor, gpg and git.
Plaintext only ever lives in the scratch file and in memory; only ciphertext
reaches the repository.
"""

import logging

from .adapters.editor import ExternalEditor
from .adapters.git_repo import GitRepository
from .adapters.gpg import GpgCipher
from .adapters.scratch import ScratchArea
from .config import GPG_ID_FILE, Config
from .core.entry import Change, Entry
from .core.naming import is_entry_name, unique_entry_name
from .errors import EmptyEntry, EntryUnchanged, ReadNotFound
from .ports import Cipher, Editor, EntryRepository

logger = logging.getLogger(__name__)


class Diary:
    """Entry lifecycle orchestrator."""

    def __init__(
        self,
        config: Config,
        cipher: Cipher,
        repository: EntryRepository,
        editor: Editor,
        scratch: ScratchArea,
    ):
        self.config = config
        self.cipher = cipher
        self.repository = repository
        self.editor = editor
        self.scratch = scratch

    @classmethod
    def from_config(cls, config: Config) -> "Diary":
        """Wire up the real gpg, git, editor and scratch adapters."""
        return cls(
            config=config,
            cipher=GpgCipher(config.gpg_binary),
            repository=GitRepository(config.repo_dir, binary=config.git_binary),
            editor=ExternalEditor(config.editor or None),
            scratch=ScratchArea(
                config.scratch_dir,
                require_memory_backed=config.require_memory_scratch,
            ),
        )

    def init(self, key_id: str) -> None:
        """Create the repository and record the recipient key id in it."""
        key_id = key_id.strip()
        if not key_id:
            raise ValueError("Key id must not be empty")

        self.repository.init(
            self.config.git_user_name,
            self.config.git_user_email,
            initial_files={GPG_ID_FILE: key_id.encode("utf-8")},
        )

    def key_id(self) -> str:
        """Recipient key id stored at init time."""
        return self.repository.read_tracked(GPG_ID_FILE).decode("utf-8").strip()

    def _check_name(self, name: str) -> str:
        if not is_entry_name(name):
            raise ReadNotFound(f"No such entry: {name}")
        return name

    def create(self) -> Entry:
        """
        Write a new entry.

        The scratch file is released before anything propagates, whether
        the editor, gpg or git failed, or the entry was left empty.
        """
        recipient = self.key_id()

        with self.scratch.session() as scratch:
            result = self.editor.edit(scratch.path)
            if result.is_empty:
                logger.info("Entry left empty, abandoning")
                raise EmptyEntry("Entry is empty, nothing saved.")
            ciphertext = self.cipher.encrypt(recipient, result.content)

        name = unique_entry_name(self.repository.tracked_files())
        self.repository.write_and_commit(name, ciphertext, Change.ADD.message(name))
        return Entry(name=name, ciphertext=ciphertext)

    def show(self, name: str) -> bytes:
        """Decrypt and return an entry's plaintext."""
        ciphertext = self.repository.read_tracked(self._check_name(name))
        return self.cipher.decrypt(ciphertext)

    def list_entries(self) -> list[str]:
        """Entry names, oldest first."""
        return self.repository.list_entries()

    def edit(self, name: str) -> Entry:
        """Re-open an existing entry in the editor and commit the changes."""
        name = self._check_name(name)
        recipient = self.key_id()
        original = self.cipher.decrypt(self.repository.read_tracked(name))

        with self.scratch.session(initial=original) as scratch:
            result = self.editor.edit(scratch.path)
            if result.is_empty:
                raise EmptyEntry(f"Entry {name} left empty, nothing saved (use 'delete' to remove it).")
            if result.content == original:
                raise EntryUnchanged(f"Entry {name} unchanged.")
            ciphertext = self.cipher.encrypt(recipient, result.content)

        self.repository.write_and_commit(name, ciphertext, Change.EDIT.message(name))
        return Entry(name=name, ciphertext=ciphertext)

    def delete(self, name: str) -> None:
        """Remove an entry from the repository."""
        name = self._check_name(name)
        self.repository.remove_and_commit(name, Change.DELETE.message(name))


def get_diary(config: Config) -> Diary:
    """Resolve the diary for a configuration."""
    return Diary.from_config(config)
