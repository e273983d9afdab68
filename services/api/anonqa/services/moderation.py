"""Pluggable content acceptance rules.

Stores only ask `policy.is_acceptable(text)`; the rules behind it can change
without touching store code.
"""

from dataclasses import dataclass
from typing import Protocol


class ContentPolicy(Protocol):
    def is_acceptable(self, text: str) -> bool:
        ...


class AcceptAllPolicy:
    """Policy that accepts any text."""

    def is_acceptable(self, text: str) -> bool:
        return True


@dataclass(frozen=True)
class BannedWordsPolicy:
    """Reject text containing any banned word (case-insensitive substring match)."""

    words: tuple[str, ...] = ()

    def is_acceptable(self, text: str) -> bool:
        lowered = text.lower()
        return not any(word.lower() in lowered for word in self.words if word)


def policy_from_words(words: list[str] | tuple[str, ...]) -> ContentPolicy:
    """Build the configured policy (settings.banned_words)."""
    if not words:
        return AcceptAllPolicy()
    return BannedWordsPolicy(words=tuple(words))
