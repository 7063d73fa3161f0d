"""Token store — create, remove, and read per-domain-per-user records.

Layout::

    {root}/{domain}/{username}/token   encrypted blob
    {root}/{domain}/{username}/name    plaintext, optional
    {root}/{domain}/{username}/email   plaintext, optional

A create is not atomic: a crash between artifacts can leave a record with a
token but no name/email. Removal always deletes the whole directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from gitok.domain.errors import (
    DecryptionError,
    EncryptionError,
    InvalidRecordKeyError,
    RecordExistsError,
    RecordNotFoundError,
)
from gitok.domain.types import EMAIL_ARTIFACT, NAME_ARTIFACT, TOKEN_ARTIFACT, Identity
from gitok.infrastructure.crypto import EncryptionGateway
from gitok.infrastructure.index import read_artifact

logger = logging.getLogger(__name__)

# Path separators, NUL, and line breaks (which would end a credential line).
_FORBIDDEN_CHARS = ("/", "\\", "\x00", "\n", "\r")


def validate_component(value: str, what: str) -> str:
    """Reject values that are not a single, visible path component."""
    if not value or value.strip() != value:
        raise InvalidRecordKeyError(f"Invalid {what}: {value!r}")
    if value.startswith(".") or any(ch in value for ch in _FORBIDDEN_CHARS):
        raise InvalidRecordKeyError(f"Invalid {what}: {value!r}")
    return value


def _drop_if_empty(directory: Path) -> None:
    if directory.is_dir() and not any(directory.iterdir()):
        directory.rmdir()


class TokenStore:
    """Owns the record directories under the store root."""

    def __init__(self, root: Path, gateway: EncryptionGateway) -> None:
        self._root = root
        self._gateway = gateway

    def record_path(self, domain: str, username: str) -> Path:
        """Directory of the ``(domain, username)`` record."""
        validate_component(domain, "domain")
        validate_component(username, "username")
        return self._root / domain / username

    def exists(self, domain: str, username: str) -> bool:
        """A record exists once its encrypted token does."""
        return (self.record_path(domain, username) / TOKEN_ARTIFACT).is_file()

    def create(
        self,
        domain: str,
        username: str,
        token: str,
        *,
        passphrase: str,
        name: str | None = None,
        email: str | None = None,
        force: bool = False,
    ) -> Path:
        """Encrypt *token* into a new record, or overwrite one when *force* is set.

        Empty *name*/*email* leave any previously stored value in place.
        """
        record = self.record_path(domain, username)
        if self.exists(domain, username) and not force:
            raise RecordExistsError(f"A token for {username} at {domain} already exists")

        created = not record.exists()
        try:
            record.mkdir(parents=True, exist_ok=True)
            self._root.chmod(0o700)
        except OSError as exc:
            raise EncryptionError(f"Could not create {record}: {exc}") from exc

        try:
            self._gateway.encrypt(token, passphrase, record / TOKEN_ARTIFACT)
        except EncryptionError:
            # A directory without a token is not a record; leave nothing behind.
            if created:
                shutil.rmtree(record, ignore_errors=True)
                _drop_if_empty(record.parent)
            raise

        for artifact, value in ((NAME_ARTIFACT, name), (EMAIL_ARTIFACT, email)):
            if value:
                (record / artifact).write_text(f"{value}\n", encoding="utf-8")

        logger.info("Stored token for %s at %s", username, domain)
        return record

    def remove(self, domain: str, username: str) -> Path:
        """Delete the whole record directory."""
        record = self.record_path(domain, username)
        if not record.is_dir():
            raise RecordNotFoundError(f"No token stored for {username} at {domain}")
        shutil.rmtree(record)
        _drop_if_empty(record.parent)
        logger.info("Removed token for %s at %s", username, domain)
        return record

    def read_optional(self, domain: str, username: str) -> Identity:
        """Stored name/email, no passphrase needed."""
        record = self.record_path(domain, username)
        return Identity(
            name=read_artifact(record / NAME_ARTIFACT),
            email=read_artifact(record / EMAIL_ARTIFACT),
        )

    def read_token(self, domain: str, username: str, passphrase: str) -> str:
        """Decrypt the token; empty output means the passphrase was wrong."""
        record = self.record_path(domain, username)
        secret = self._gateway.decrypt(record / TOKEN_ARTIFACT, passphrase)
        if not secret:
            raise DecryptionError(f"Incorrect passphrase for {username} at {domain}")
        return secret
