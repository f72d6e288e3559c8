"""Character, word, and line counts for the editor status line."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NoteStats:
    characters: int = 0
    words: int = 0
    lines: int = 0

    def summary(self) -> str:
        return f"{self.characters} characters | {self.words} words"


def compute_stats(text: str) -> NoteStats:
    stripped = text.strip()
    return NoteStats(
        characters=len(text),
        words=len(stripped.split()) if stripped else 0,
        lines=text.count("\n") + 1 if text else 0,
    )
