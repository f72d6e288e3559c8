from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence, Tuple

import pytest

from note_engine.history import HistoryStatus, NoteHistory
from note_engine.runtime import telemetry
from note_engine.storage import MemoryStore, StorageError


class FailingStore:
    """Loads fine, refuses every save."""

    def __init__(self, snapshots: Tuple[str, ...] = ("",)) -> None:
        self.snapshots = snapshots
        self.attempts: List[Tuple[str, ...]] = []

    def load(self) -> Tuple[str, ...]:
        return self.snapshots

    def save(self, snapshots: Sequence[str]) -> None:
        self.attempts.append(tuple(snapshots))
        raise StorageError("disk on fire", backend="test")


def make_history(*texts: str, store: MemoryStore | None = None) -> NoteHistory:
    history = NoteHistory(store=store)
    for text in texts:
        history.commit(text)
    return history


def test_commits_track_current_and_length() -> None:
    texts = ["alpha", "beta", "gamma", "delta"]
    history = make_history(*texts)

    assert history.current() == "delta"
    assert len(history.snapshots) == 1 + len(texts)


def test_commit_current_is_idempotent() -> None:
    history = make_history("a", "b")
    history.undo()
    before = (history.snapshots, history.redo_stack)

    result = history.commit(history.current())

    assert result.status is HistoryStatus.UNCHANGED
    assert (history.snapshots, history.redo_stack) == before


def test_undo_redo_round_trip() -> None:
    history = make_history("a", "b", "c")

    for _ in range(3):
        assert history.undo().ok
    assert history.current() == ""
    assert history.can_undo() is False

    for _ in range(3):
        assert history.redo().ok
    assert history.current() == "c"
    assert history.redo_stack == ()
    assert history.can_redo() is False


def test_redo_invalidated_by_commit() -> None:
    history = make_history("a", "b", "c")
    history.undo()
    history.undo()

    history.commit("fresh")

    result = history.redo()
    assert result.status is HistoryStatus.NOTHING_TO_REDO
    assert result.ok is False
    assert history.current() == "fresh"


def test_undo_floor_reports_nothing_to_undo() -> None:
    history = NoteHistory()

    result = history.undo()

    assert result.status is HistoryStatus.NOTHING_TO_UNDO
    assert result.message == "Nothing to undo"
    assert history.snapshots == ("",)


def test_clear_resets_and_blocks_undo() -> None:
    history = make_history("x", "y")
    history.undo()

    history.clear()

    assert history.current() == ""
    assert history.redo_stack == ()
    assert history.undo().ok is False


def test_changing_operations_persist_snapshots() -> None:
    store = MemoryStore()
    history = make_history("a", "b", store=store)
    assert store.saved == ("", "a", "b")

    history.undo()
    assert store.saved == ("", "a")

    history.redo()
    assert store.saved == ("", "a", "b")

    history.clear()
    assert store.saved == ("",)
    assert store.save_count == 5


def test_noops_and_failures_do_not_persist() -> None:
    store = MemoryStore()
    history = NoteHistory(store=store)

    history.commit("")
    history.undo()
    history.redo()

    assert store.save_count == 0


def test_open_restores_saved_sequence() -> None:
    store = MemoryStore(["", "draft", "final"])

    history = NoteHistory.open(store)

    assert history.current() == "final"
    assert history.undo().ok
    assert history.current() == "draft"


def test_open_applies_limit() -> None:
    store = MemoryStore(["", "a", "b", "c"])

    history = NoteHistory.open(store, limit=2)

    assert history.snapshots == ("b", "c")


def test_failing_store_never_rolls_back() -> None:
    store = FailingStore()
    history = NoteHistory(store=store)  # type: ignore[arg-type]

    result = history.commit("kept")

    assert result.status is HistoryStatus.COMMITTED
    assert history.current() == "kept"
    assert store.attempts == [("", "kept")]
    assert history.undo().ok
    assert history.current() == ""


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NoteHistory(limit=0)


def test_histories_are_independent() -> None:
    first = make_history("one")
    second = make_history("two")

    first.undo()

    assert first.current() == ""
    assert second.current() == "two"


class UnreadableStore:
    def load(self) -> Tuple[str, ...]:
        raise StorageError("permission denied", backend="test")

    def save(self, snapshots: Sequence[str]) -> None:
        return None


def test_open_unreadable_store_starts_empty() -> None:
    history = NoteHistory.open(UnreadableStore())  # type: ignore[arg-type]

    assert history.snapshots == ("",)
    assert history.commit("fresh start").changed is True


def test_deferred_saves_wait_for_the_host() -> None:
    store = MemoryStore()
    jobs: List[Callable[[], None]] = []
    history = NoteHistory(store=store, defer=jobs.append)

    history.commit("a")
    history.commit("ab")

    assert history.current() == "ab"
    assert store.save_count == 0
    assert len(jobs) == 2

    jobs[-1]()
    assert store.saved == ("", "a", "ab")

    # Each job is bound to the snapshots of its own moment.
    jobs[0]()
    assert store.saved == ("", "a")


def test_deferred_save_failure_is_absorbed() -> None:
    store = FailingStore()
    jobs: List[Callable[[], None]] = []
    history = NoteHistory(store=store, defer=jobs.append)  # type: ignore[arg-type]

    history.commit("kept")
    jobs.pop()()

    assert store.attempts == [("", "kept")]
    assert history.current() == "kept"


def test_applied_event_reports_status(monkeypatch: pytest.MonkeyPatch) -> None:
    events: List[Tuple[str, str, Dict[str, Any]]] = []

    def capture(name: str, *, level: str = "info", data=None, logger_name=None) -> None:
        events.append((name, level, dict(data or {})))

    monkeypatch.setattr(telemetry, "record_event", capture)
    history = NoteHistory()

    history.commit("x")
    history.redo()

    applied = [event for event in events if event[0] == "history.applied"]
    assert [(e[1], e[2]["operation"], e[2]["status"]) for e in applied] == [
        ("debug", "commit", "committed"),
        ("debug", "redo", "nothing_to_redo"),
    ]
    assert applied[0][2]["snapshots"] == 2
