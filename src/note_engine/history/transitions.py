"""Pure state transitions for the snapshot history.

Each function takes a :class:`HistoryState` and returns a :class:`Transition`
carrying the next state and a result signal. Nothing here persists, renders,
or logs; :class:`~note_engine.history.timeline.NoteHistory` layers those
side effects on top.
"""

from __future__ import annotations

from typing import Optional

from .state import (
    EMPTY_SNAPSHOTS,
    HistoryResult,
    HistoryState,
    HistoryStatus,
    Transition,
)

UNDO_OK = "Undo successful"
REDO_OK = "Redo successful"
NOTHING_TO_UNDO = "Nothing to undo"
NOTHING_TO_REDO = "Nothing to redo"
CLEARED = "Notes cleared"


def initial_state() -> HistoryState:
    return HistoryState()


def commit(
    state: HistoryState, text: str, *, limit: Optional[int] = None
) -> Transition:
    if limit is not None and limit < 1:
        raise ValueError("History limit must be at least 1")
    if text == state.current:
        return Transition(state, HistoryResult(HistoryStatus.UNCHANGED))

    snapshots = state.snapshots + (text,)
    if limit is not None and len(snapshots) > limit:
        snapshots = snapshots[-limit:]
    return Transition(
        HistoryState(snapshots=snapshots, redo=()),
        HistoryResult(HistoryStatus.COMMITTED, changed=True),
    )


def undo(state: HistoryState) -> Transition:
    if not state.can_undo():
        return Transition(
            state, HistoryResult(HistoryStatus.NOTHING_TO_UNDO, NOTHING_TO_UNDO)
        )
    popped = state.snapshots[-1]
    return Transition(
        HistoryState(snapshots=state.snapshots[:-1], redo=state.redo + (popped,)),
        HistoryResult(HistoryStatus.UNDONE, UNDO_OK, changed=True),
    )


def redo(state: HistoryState) -> Transition:
    if not state.can_redo():
        return Transition(
            state, HistoryResult(HistoryStatus.NOTHING_TO_REDO, NOTHING_TO_REDO)
        )
    restored = state.redo[-1]
    return Transition(
        HistoryState(snapshots=state.snapshots + (restored,), redo=state.redo[:-1]),
        HistoryResult(HistoryStatus.REDONE, REDO_OK, changed=True),
    )


def clear(_state: HistoryState) -> Transition:
    return Transition(
        HistoryState(snapshots=EMPTY_SNAPSHOTS, redo=()),
        HistoryResult(HistoryStatus.CLEARED, CLEARED, changed=True),
    )


__all__ = [
    "CLEARED",
    "NOTHING_TO_REDO",
    "NOTHING_TO_UNDO",
    "REDO_OK",
    "UNDO_OK",
    "clear",
    "commit",
    "initial_state",
    "redo",
    "undo",
]
