"""Store index — locate usernames across domain directories.

The store root holds one directory per domain and one directory per
username inside it. Entries starting with ``.`` are never domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gitok.domain.types import (
    EMAIL_ARTIFACT,
    NAME_ARTIFACT,
    TOKEN_ARTIFACT,
    Identity,
    MatchResult,
    RecordSummary,
)

logger = logging.getLogger(__name__)


def read_artifact(path: Path) -> str | None:
    """Read a plaintext artifact, returning None when absent or blank."""
    try:
        value = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return value or None


class StoreIndex:
    """Read-only view over the on-disk record hierarchy."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def domains(self) -> list[str]:
        """All domain directories, sorted."""
        if not self._root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self._root.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def find(self, username: str) -> MatchResult:
        """Classify where *username* is stored: not found, unique, or ambiguous."""
        if not username or "/" in username or username in (".", ".."):
            return MatchResult.from_domains([])
        # Only directories holding an encrypted token count as records.
        hits = [
            d for d in self.domains() if (self._root / d / username / TOKEN_ARTIFACT).is_file()
        ]
        result = MatchResult.from_domains(hits)
        logger.debug("Index lookup for %s: %s %s", username, result.kind, list(result.domains))
        return result

    def records(self) -> list[RecordSummary]:
        """Every stored record, sorted by domain then username."""
        summaries: list[RecordSummary] = []
        for domain in self.domains():
            domain_dir = self._root / domain
            for user_dir in sorted(domain_dir.iterdir()):
                if not user_dir.is_dir() or user_dir.name.startswith("."):
                    continue
                summaries.append(
                    RecordSummary(
                        domain=domain,
                        username=user_dir.name,
                        has_token=(user_dir / TOKEN_ARTIFACT).is_file(),
                        identity=Identity(
                            name=read_artifact(user_dir / NAME_ARTIFACT),
                            email=read_artifact(user_dir / EMAIL_ARTIFACT),
                        ),
                    )
                )
        return summaries
