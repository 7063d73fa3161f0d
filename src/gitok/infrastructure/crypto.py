"""Encryption gateway — passphrase-based Fernet encryption of a single file.

Artifact layout: 16-byte random salt followed by the Fernet token. The key is
derived from the passphrase with PBKDF2-HMAC-SHA256.

Decryption has no error channel for a wrong passphrase: any authentication
failure comes back as an empty string, and callers must treat empty output
as failure.
"""

from __future__ import annotations

import base64
import logging
import os
import secrets
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gitok.domain.errors import EncryptionError

logger = logging.getLogger(__name__)

SALT_SIZE = 16
DEFAULT_ITERATIONS = 480_000


class EncryptionGateway:
    """Encrypts and decrypts one secret per file."""

    def __init__(self, *, iterations: int = DEFAULT_ITERATIONS) -> None:
        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    def _derive_key(self, passphrase: str, salt: bytes) -> bytes:
        """Derive a Fernet key from *passphrase*."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self._iterations,
        )
        return base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8")))

    def encrypt(self, plaintext: str, passphrase: str, path: Path) -> None:
        """Encrypt *plaintext* and write the blob to *path* (mode 0600)."""
        if not passphrase:
            raise EncryptionError("Refusing to encrypt with an empty passphrase")

        salt = secrets.token_bytes(SALT_SIZE)
        blob = salt + Fernet(self._derive_key(passphrase, salt)).encrypt(plaintext.encode("utf-8"))
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as fh:
                fh.write(blob)
            path.chmod(0o600)
        except OSError as exc:
            raise EncryptionError(f"Could not write {path}: {exc}") from exc
        logger.debug("Wrote encrypted artifact %s (%d bytes)", path, len(blob))

    def decrypt(self, path: Path, passphrase: str) -> str:
        """Return the plaintext stored at *path*, or ``""`` if it cannot be recovered."""
        try:
            blob = path.read_bytes()
        except OSError as exc:
            logger.debug("Cannot read encrypted artifact %s: %s", path, exc)
            return ""

        if len(blob) <= SALT_SIZE:
            logger.debug("Encrypted artifact %s is truncated", path)
            return ""

        salt, token = blob[:SALT_SIZE], blob[SALT_SIZE:]
        try:
            plaintext = Fernet(self._derive_key(passphrase, salt)).decrypt(token)
        except InvalidToken:
            logger.debug("Decryption of %s failed authentication", path)
            return ""
        return plaintext.decode("utf-8", errors="replace")
