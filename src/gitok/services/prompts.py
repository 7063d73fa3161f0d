"""Operator prompting contract used by the interactive flows.

Services describe what they need as :class:`PromptField` entries in a
table keyed by field name; answers come back in a plain dict under the
same keys. The CLI supplies a click-backed :class:`Prompter`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class PromptField:
    """One value to ask the operator for."""

    label: str
    default: str | None = None
    secret: bool = False
    confirm: bool = False
    required: bool = True


class Prompter(Protocol):
    """What the services need from a terminal."""

    def ask(self, field: PromptField) -> str:
        """Return the operator's answer (or the default when not interactive)."""
        ...

    def choose(self, label: str, choices: list[str]) -> str | None:
        """Pick one of *choices*; None when no choice can be made."""
        ...

    def notify(self, message: str) -> None:
        """Show an informational message before the next prompt."""
        ...


def collect(
    prompter: Prompter,
    fields: dict[str, PromptField],
    preset: dict[str, str | None] | None = None,
) -> dict[str, str]:
    """Ask for every field not already present in *preset*.

    Preset values (e.g. from command-line options) are used as given and
    skip the prompt. Answers are stripped; secrets are kept verbatim.
    """
    preset = preset or {}
    answers: dict[str, str] = {}
    for key, field in fields.items():
        value = preset.get(key)
        if value is None:
            value = prompter.ask(field)
        answers[key] = value if field.secret else value.strip()
    return answers
