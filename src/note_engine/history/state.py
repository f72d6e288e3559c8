"""Immutable history state and the result values transitions report."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

EMPTY_SNAPSHOTS: Tuple[str, ...] = ("",)


class HistoryStateError(ValueError):
    """Raised when a state is built from an empty snapshot sequence."""


class HistoryStatus(str, Enum):
    COMMITTED = "committed"
    UNCHANGED = "unchanged"
    UNDONE = "undone"
    REDONE = "redone"
    CLEARED = "cleared"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"


_FAILURES = frozenset({HistoryStatus.NOTHING_TO_UNDO, HistoryStatus.NOTHING_TO_REDO})


@dataclass(frozen=True, slots=True)
class HistoryResult:
    """Outcome of one history operation.

    ``changed`` tells the caller whether the snapshot sequence or the redo
    buffer moved, and therefore whether anything needs persisting or
    re-rendering.
    """

    status: HistoryStatus
    message: str = ""
    changed: bool = False

    @property
    def ok(self) -> bool:
        return self.status not in _FAILURES


@dataclass(frozen=True, slots=True)
class HistoryState:
    """Snapshot sequence plus redo buffer.

    ``snapshots[0]`` is the floor state and ``snapshots[-1]`` the current
    text. ``redo`` holds undone snapshots, most recently undone last.
    """

    snapshots: Tuple[str, ...] = EMPTY_SNAPSHOTS
    redo: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.snapshots:
            raise HistoryStateError("Snapshot sequence must never be empty")

    @classmethod
    def from_snapshots(cls, snapshots: Iterable[str]) -> "HistoryState":
        restored = tuple(snapshots)
        return cls(snapshots=restored or EMPTY_SNAPSHOTS)

    @property
    def current(self) -> str:
        return self.snapshots[-1]

    def can_undo(self) -> bool:
        return len(self.snapshots) > 1

    def can_redo(self) -> bool:
        return bool(self.redo)


@dataclass(frozen=True, slots=True)
class Transition:
    state: HistoryState
    result: HistoryResult
