"""GnuPG adapter - subprocess wrapper for encrypting entries."""

import logging
import subprocess

from deary.errors import DecryptionFailed, EncryptionFailed

logger = logging.getLogger(__name__)

GPG_OPTS = [
    "--quiet",
    "--yes",
    "--compress-algo=none",
    "--no-encrypt-to",
]


def _stderr_text(stderr: bytes) -> str:
    return stderr.decode("utf-8", errors="replace").strip()


class GpgCipher:
    """
    gpg subprocess adapter.

    Implements Cipher protocol. Data goes through stdin/stdout only, so a
    failed call never leaves partial output on disk.
    """

    def __init__(self, binary: str = "gpg"):
        self.binary = binary

    def encrypt(self, recipient: str, plaintext: bytes) -> bytes:
        """Encrypt plaintext for the recipient key."""
        recipient = recipient.strip()
        if not recipient:
            raise EncryptionFailed("No recipient key configured")

        # --batch: an untrusted or unknown key must fail, not prompt
        cmd = [
            self.binary,
            *GPG_OPTS,
            "--batch",
            "--encrypt",
            "--recipient",
            recipient,
            "--output",
            "-",
        ]
        logger.debug(f"Encrypting for {recipient}")
        try:
            proc = subprocess.run(cmd, input=plaintext, capture_output=True)
        except FileNotFoundError:
            raise EncryptionFailed(f"{self.binary} executable not found in PATH")

        if proc.returncode != 0 or not proc.stdout:
            detail = _stderr_text(proc.stderr) or f"exit status {proc.returncode}"
            logger.error(f"gpg encryption failed: {detail}")
            raise EncryptionFailed(f"Encryption for {recipient} failed: {detail}")
        return proc.stdout

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ciphertext. gpg-agent may ask for the passphrase."""
        cmd = [self.binary, *GPG_OPTS, "--decrypt", "--output", "-"]
        try:
            proc = subprocess.run(cmd, input=ciphertext, capture_output=True)
        except FileNotFoundError:
            raise DecryptionFailed(f"{self.binary} executable not found in PATH")

        if proc.returncode != 0:
            detail = _stderr_text(proc.stderr) or f"exit status {proc.returncode}"
            logger.error(f"gpg decryption failed: {detail}")
            raise DecryptionFailed(f"Decryption failed: {detail}")
        return proc.stdout
