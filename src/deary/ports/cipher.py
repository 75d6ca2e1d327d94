"""Encryption engine interface."""

from typing import Protocol


class Cipher(Protocol):
    """Interface for asymmetric encryption of entries."""

    def encrypt(self, recipient: str, plaintext: bytes) -> bytes:
        """Encrypt plaintext for the recipient key. Returns ciphertext."""
        ...

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ciphertext with whatever secret key the engine holds."""
        ...
