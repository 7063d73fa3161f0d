"""Exception hierarchy raised by the infrastructure layer.

Services translate these into ``ServiceResult`` failures; the ``code``
class attribute is the ``ServiceError.code`` each one maps to.
"""

from __future__ import annotations


class GitokError(Exception):
    """Base for every expected gitok failure."""

    code = "GITOK_ERROR"


class InvalidRecordKeyError(GitokError, ValueError):
    """A domain or username is not a safe single path component."""

    code = "BAD_ARGUMENTS"


class RecordExistsError(GitokError):
    """A record already exists and overwrite was not forced."""

    code = "ALREADY_EXISTS"


class RecordNotFoundError(GitokError):
    """No record exists for the requested domain and username."""

    code = "NOT_FOUND"


class EncryptionError(GitokError):
    """The token artifact could not be encrypted or written."""

    code = "ENCRYPTION_FAILED"


class DecryptionError(GitokError):
    """Decryption produced no output (wrong passphrase or damaged artifact)."""

    code = "INCORRECT_PASSWORD"


class MissingDependencyError(GitokError):
    """A required external program is not installed."""

    code = "MISSING_DEPENDENCY"


class GitCommandError(GitokError):
    """A git subprocess exited non-zero."""

    code = "GIT_FAILED"

    def __init__(self, message: str, *, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ApprovalError(GitCommandError):
    """``git credential approve`` rejected the credential."""

    code = "APPROVAL_FAILED"
