from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List, Tuple

import pytest

from note_engine.editor import (
    EmptyExportError,
    NoteSession,
    NoteStats,
    NoticeLevel,
    SessionHooks,
    build_export,
    compute_stats,
    export_filename,
    write_export,
)
from note_engine.history import HistoryStatus, NoteHistory
from note_engine.storage import MemoryStore


class Surface:
    """Records everything the session pushes to the host."""

    def __init__(self) -> None:
        self.texts: List[str] = []
        self.stats: List[NoteStats] = []
        self.notices: List[Tuple[str, NoticeLevel]] = []
        self.logs: List[str] = []

    def hooks(self) -> SessionHooks:
        return SessionHooks(
            update_text=self.texts.append,
            update_stats=self.stats.append,
            notify=lambda message, level: self.notices.append((message, level)),
            log=self.logs.append,
        )


def make_session(
    tmp_path: Path, *, store: MemoryStore | None = None
) -> Tuple[NoteSession, Surface]:
    surface = Surface()
    history = NoteHistory(store=store)
    session = NoteSession(
        history,
        surface.hooks(),
        export_dir=tmp_path,
        today=lambda: date(2024, 3, 9),
    )
    return session, surface


def test_compute_stats() -> None:
    assert compute_stats("") == NoteStats(0, 0, 0)
    assert compute_stats("   ") == NoteStats(3, 0, 1)
    assert compute_stats("hello  world\nagain") == NoteStats(18, 3, 2)
    assert compute_stats("one\n") == NoteStats(4, 1, 2)
    assert compute_stats("a b").summary() == "3 characters | 2 words"


def test_export_filename_uses_iso_date() -> None:
    assert export_filename(date(2024, 1, 5)) == "notes_2024-01-05.txt"
    assert export_filename(date(2024, 1, 5), ".md") == "notes_2024-01-05.md"
    with pytest.raises(ValueError):
        export_filename(date(2024, 1, 5), " . ")


def test_build_export_rejects_blank_text() -> None:
    with pytest.raises(EmptyExportError):
        build_export(" \n\t", day=date(2024, 1, 5))


def test_write_export_creates_file(tmp_path: Path) -> None:
    artifact = build_export("line one\r\nline two", day=date(2024, 1, 5))

    path = write_export(artifact, tmp_path / "out")

    assert path.name == "notes_2024-01-05.txt"
    assert path.read_bytes() == "line one\r\nline two".encode("utf-8")


def test_input_commits_and_refreshes_stats(tmp_path: Path) -> None:
    store = MemoryStore()
    session, surface = make_session(tmp_path, store=store)

    result = session.handle_input("hello world")

    assert result.status is HistoryStatus.COMMITTED
    assert store.saved == ("", "hello world")
    assert surface.stats[-1] == NoteStats(11, 2, 1)
    assert surface.texts == []


def test_repeated_input_is_ignored(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)
    session.handle_input("same")
    stats_before = len(surface.stats)

    result = session.handle_input("same")

    assert result.status is HistoryStatus.UNCHANGED
    assert len(surface.stats) == stats_before


def test_undo_redo_push_text_and_notices(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)
    session.handle_input("a")
    session.handle_input("ab")

    session.undo()
    assert surface.texts[-1] == "a"
    assert surface.notices[-1] == ("Undo successful", NoticeLevel.SUCCESS)

    session.redo()
    assert surface.texts[-1] == "ab"
    assert surface.notices[-1] == ("Redo successful", NoticeLevel.SUCCESS)


def test_failed_undo_and_redo_warn(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)

    undo = session.undo()
    redo = session.redo()

    assert undo.ok is False and redo.ok is False
    assert surface.texts == []
    assert surface.notices == [
        ("Nothing to undo", NoticeLevel.WARNING),
        ("Nothing to redo", NoticeLevel.WARNING),
    ]


def test_clear_requires_content(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)

    assert session.clear() is False
    assert surface.notices[-1] == ("Notes are already empty", NoticeLevel.INFO)


def test_clear_can_be_declined(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)
    session.handle_input("keep me")

    assert session.clear(confirm=lambda: False) is False
    assert session.text == "keep me"


def test_clear_resets_history(tmp_path: Path) -> None:
    store = MemoryStore()
    session, surface = make_session(tmp_path, store=store)
    session.handle_input("draft")

    assert session.clear(confirm=lambda: True) is True

    assert session.text == ""
    assert surface.texts[-1] == ""
    assert surface.notices[-1] == ("Notes cleared", NoticeLevel.SUCCESS)
    assert store.saved == ("",)
    assert session.history.can_undo() is False


def test_export_writes_current_text(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)
    session.handle_input("exported body")

    path = session.export()

    assert path == tmp_path / "notes_2024-03-09.txt"
    assert path.read_text(encoding="utf-8") == "exported body"
    assert surface.notices[-1] == (
        "Downloaded as notes_2024-03-09.txt",
        NoticeLevel.SUCCESS,
    )


def test_export_of_empty_notes_warns(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)

    assert session.export() is None
    assert surface.notices[-1] == ("Cannot export empty notes", NoticeLevel.WARNING)
    assert list(tmp_path.iterdir()) == []


def test_session_emits_log_lines(tmp_path: Path) -> None:
    session, surface = make_session(tmp_path)

    session.handle_input("x")

    assert any(line.startswith("input") for line in surface.logs)


def test_export_failure_is_reported(tmp_path: Path) -> None:
    blocked = tmp_path / "exports"
    blocked.write_text("not a directory", encoding="utf-8")
    surface = Surface()
    session = NoteSession(
        NoteHistory(),
        surface.hooks(),
        export_dir=blocked,
        today=lambda: date(2024, 3, 9),
    )
    session.handle_input("unsaved thoughts")

    assert session.export() is None

    message, level = surface.notices[-1]
    assert level is NoticeLevel.DANGER
    assert message.startswith("Could not export notes: ")
    assert session.text == "unsaved thoughts"
    assert any(line.startswith("export") and "error=" in line for line in surface.logs)
