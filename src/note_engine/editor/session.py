"""Editing-surface controller that wires a NoteHistory into UI callbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from note_engine.history import HistoryResult, NoteHistory

from .export import EmptyExportError, build_export, write_export
from .stats import NoteStats, compute_stats


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class SessionHooks:
    """Callbacks the session invokes to update the host surface."""

    update_text: Callable[[str], None]
    update_stats: Callable[[NoteStats], None] = _noop
    notify: Callable[[str, NoticeLevel], None] = _noop
    # Optional debug line sink
    log: Callable[[str], None] = _noop


class NoteSession:
    """Drives one note: commits edits, replays undo/redo, clears, exports.

    The host calls :meth:`handle_input` on every text change and the action
    methods from its buttons or key bindings. Text is pushed back through
    ``hooks.update_text`` only when the history moved under the host.
    """

    def __init__(
        self,
        history: NoteHistory,
        hooks: SessionHooks,
        *,
        export_dir: str | os.PathLike[str] = ".",
        export_extension: str = "txt",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.history = history
        self.hooks = hooks
        self.export_dir = Path(export_dir)
        self.export_extension = export_extension
        self._today = today
        self._refresh_stats()

    @property
    def text(self) -> str:
        return self.history.current()

    def handle_input(self, text: str) -> HistoryResult:
        result = self.history.commit(text)
        if result.changed:
            self._refresh_stats()
        self._log_state("input", status=result.status.value)
        return result

    def undo(self) -> HistoryResult:
        return self._replay(self.history.undo(), "undo")

    def redo(self) -> HistoryResult:
        return self._replay(self.history.redo(), "redo")

    def clear(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        if not self.text.strip():
            self.hooks.notify("Notes are already empty", NoticeLevel.INFO)
            return False
        if confirm is not None and not confirm():
            self._log_state("clear", status="declined")
            return False

        result = self.history.clear()
        self.hooks.update_text(self.text)
        self._refresh_stats()
        self.hooks.notify(result.message, NoticeLevel.SUCCESS)
        self._log_state("clear", status=result.status.value)
        return True

    def export(self) -> Optional[Path]:
        try:
            artifact = build_export(
                self.text, day=self._today(), extension=self.export_extension
            )
        except EmptyExportError as exc:
            self.hooks.notify(str(exc), NoticeLevel.WARNING)
            return None

        try:
            path = write_export(artifact, self.export_dir)
        except OSError as exc:
            self.hooks.notify(f"Could not export notes: {exc}", NoticeLevel.DANGER)
            self._log_state("export", error=str(exc))
            return None
        self.hooks.notify(f"Downloaded as {artifact.filename}", NoticeLevel.SUCCESS)
        self._log_state("export", path=str(path))
        return path

    def _replay(self, result: HistoryResult, label: str) -> HistoryResult:
        if result.ok:
            self.hooks.update_text(self.text)
            self._refresh_stats()
            self.hooks.notify(result.message, NoticeLevel.SUCCESS)
        else:
            self.hooks.notify(result.message, NoticeLevel.WARNING)
        self._log_state(label, status=result.status.value)
        return result

    def _refresh_stats(self) -> None:
        self.hooks.update_stats(compute_stats(self.text))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "history": self.history.name,
            "snapshots": len(self.history.snapshots),
            "redo": len(self.history.redo_stack),
        }
        snapshot.update(fields)
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["NoteSession", "NoticeLevel", "SessionHooks"]
