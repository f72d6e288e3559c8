"""Caller-owned undo/redo history that persists after every mutation."""

from __future__ import annotations

from functools import partial
from typing import Callable, Optional, Tuple

from note_engine.runtime import telemetry
from note_engine.storage.base import SnapshotStore, StorageError

from . import transitions
from .state import EMPTY_SNAPSHOTS, HistoryResult, HistoryState, Transition

SaveJob = Callable[[], None]


class NoteHistory:
    """Linear text history for one editing session.

    The in-memory state is the source of truth. A store, when given, receives
    the snapshot sequence after each operation that changed it; a failing
    store is logged and never rolls the mutation back.

    ``defer`` lets a host move saves off its event loop: it receives a
    zero-argument job bound to the snapshots of that moment and decides when
    and where to run it. Without it saves run inline.
    """

    def __init__(
        self,
        *,
        store: Optional[SnapshotStore] = None,
        state: Optional[HistoryState] = None,
        limit: Optional[int] = None,
        name: str = "notes",
        defer: Optional[Callable[[SaveJob], None]] = None,
    ) -> None:
        if limit is not None and limit < 1:
            raise ValueError("History limit must be at least 1")
        self.name = name
        self.store = store
        self.limit = limit
        self.defer = defer
        self._state = state or transitions.initial_state()

    @classmethod
    def open(
        cls,
        store: SnapshotStore,
        *,
        limit: Optional[int] = None,
        name: str = "notes",
    ) -> "NoteHistory":
        """Restore the snapshot sequence from ``store``.

        An unreadable store starts the session from the empty floor state.
        """

        with telemetry.span("history::open", metadata={"history": name}):
            try:
                snapshots = store.load()
            except StorageError as exc:
                telemetry.record_event(
                    "history.load_failed",
                    level="warning",
                    data={"history": name, "backend": exc.backend, "error": str(exc)},
                )
                snapshots = EMPTY_SNAPSHOTS
            state = HistoryState.from_snapshots(snapshots)
        if limit is not None and len(state.snapshots) > limit:
            state = HistoryState(snapshots=state.snapshots[-limit:])
        return cls(store=store, state=state, limit=limit, name=name)

    @property
    def state(self) -> HistoryState:
        return self._state

    @property
    def snapshots(self) -> Tuple[str, ...]:
        return self._state.snapshots

    @property
    def redo_stack(self) -> Tuple[str, ...]:
        return self._state.redo

    def current(self) -> str:
        return self._state.current

    def can_undo(self) -> bool:
        return self._state.can_undo()

    def can_redo(self) -> bool:
        return self._state.can_redo()

    def commit(self, text: str) -> HistoryResult:
        return self._apply(
            "commit", lambda state: transitions.commit(state, text, limit=self.limit)
        )

    def undo(self) -> HistoryResult:
        return self._apply("undo", transitions.undo)

    def redo(self) -> HistoryResult:
        return self._apply("redo", transitions.redo)

    def clear(self) -> HistoryResult:
        return self._apply("clear", transitions.clear)

    def _apply(
        self, label: str, step: Callable[[HistoryState], Transition]
    ) -> HistoryResult:
        with telemetry.span(
            f"history::{label}",
            component=True,
            metadata={"history": self.name},
        ):
            transition = step(self._state)
            self._state = transition.state
            if transition.result.changed:
                self._persist(label)
        telemetry.record_event(
            "history.applied",
            level="debug",
            data={
                "history": self.name,
                "operation": label,
                "status": transition.result.status.value,
                "snapshots": len(self._state.snapshots),
            },
        )
        return transition.result

    def _persist(self, label: str) -> None:
        if self.store is None:
            return
        job = partial(self._save, self.store, self._state.snapshots, label)
        if self.defer is not None:
            self.defer(job)
        else:
            job()

    def _save(
        self, store: SnapshotStore, snapshots: Tuple[str, ...], label: str
    ) -> None:
        try:
            store.save(snapshots)
        except StorageError as exc:
            telemetry.record_event(
                "history.persist_failed",
                level="warning",
                data={
                    "history": self.name,
                    "operation": label,
                    "backend": exc.backend,
                    "error": str(exc),
                },
            )


__all__ = ["NoteHistory", "SaveJob"]
