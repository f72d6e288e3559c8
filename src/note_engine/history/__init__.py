"""Snapshot history with undo/redo."""

from . import transitions
from .state import (
    EMPTY_SNAPSHOTS,
    HistoryResult,
    HistoryState,
    HistoryStateError,
    HistoryStatus,
    Transition,
)
from .timeline import NoteHistory

__all__ = [
    "EMPTY_SNAPSHOTS",
    "HistoryResult",
    "HistoryState",
    "HistoryStateError",
    "HistoryStatus",
    "NoteHistory",
    "Transition",
    "transitions",
]
