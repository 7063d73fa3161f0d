"""Record keys, index match results, and stored identities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

TOKEN_ARTIFACT = "token"
NAME_ARTIFACT = "name"
EMAIL_ARTIFACT = "email"


class MatchKind(StrEnum):
    """Outcome classes for a username lookup across all domains."""

    NOT_FOUND = "not_found"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class MatchResult:
    """Where a username lives in the store.

    ``domains`` is sorted and holds zero, one, or several entries matching
    :attr:`kind`.
    """

    kind: MatchKind
    domains: tuple[str, ...] = ()

    @classmethod
    def from_domains(cls, domains: list[str] | tuple[str, ...]) -> MatchResult:
        ordered = tuple(sorted(set(domains)))
        if not ordered:
            return cls(MatchKind.NOT_FOUND)
        if len(ordered) == 1:
            return cls(MatchKind.UNIQUE, ordered)
        return cls(MatchKind.AMBIGUOUS, ordered)

    @property
    def domain(self) -> str | None:
        """The single resolved domain for a unique match."""
        if self.kind is MatchKind.UNIQUE:
            return self.domains[0]
        return None

    @property
    def found(self) -> bool:
        return self.kind is not MatchKind.NOT_FOUND


@dataclass(frozen=True)
class Identity:
    """Optional display identity stored alongside a token."""

    name: str | None = None
    email: str | None = None

    @property
    def empty(self) -> bool:
        return not self.name and not self.email

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.name:
            data["name"] = self.name
        if self.email:
            data["email"] = self.email
        return data


@dataclass(frozen=True)
class RecordSummary:
    """One stored record as seen by the listing operation."""

    domain: str
    username: str
    has_token: bool
    identity: Identity = field(default_factory=Identity)

    def to_dict(self) -> dict[str, object]:
        return {
            "domain": self.domain,
            "username": self.username,
            "has_token": self.has_token,
            **self.identity.to_dict(),
        }
