"""Executable Textual app that hosts a note session."""

from __future__ import annotations

import argparse
import asyncio
import threading
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use note_engine.adapters.textual.app"
    ) from exc

from note_engine.editor import NoteSession, NoteStats, NoticeLevel, SessionHooks
from note_engine.history import NoteHistory
from note_engine.history.timeline import SaveJob
from note_engine.runtime import telemetry
from note_engine.runtime.config import STORAGE_BACKENDS, EngineConfig
from note_engine.storage import open_store

SEVERITY: Dict[NoticeLevel, str] = {
    NoticeLevel.SUCCESS: "information",
    NoticeLevel.INFO: "information",
    NoticeLevel.WARNING: "warning",
    NoticeLevel.DANGER: "error",
}


@dataclass
class UIState:
    stats_text: str = ""
    last_notice: str = ""


class NoteEditorApp(App[None]):
    """Single-note editor with undo/redo, export, and clear."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor-area {
		height: 1fr;
		border: round $accent;
	}

	#stats-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    # priority keeps TextArea's own undo/redo bindings from shadowing these
    BINDINGS = [
        Binding("ctrl+z", "undo", "Undo", priority=True),
        Binding("ctrl+y", "redo", "Redo", priority=True),
        Binding("ctrl+s", "export", "Export", priority=True),
        Binding("ctrl+l", "clear", "Clear", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        config: Optional[EngineConfig] = None,
        history: Optional[NoteHistory] = None,
    ) -> None:
        super().__init__()
        self.config = config or EngineConfig.from_env()
        self.history = history or NoteHistory.open(
            open_store(self.config), limit=self.config.history_limit
        )
        self._ui = UIState()
        self.session: NoteSession | None = None
        self._editor: TextArea | None = None
        self._stats_widget: Static | None = None
        self._clear_armed = False
        self._save_lock = threading.Lock()
        self._pending_save: SaveJob | None = None
        self._saves_idle = threading.Event()
        self._saves_idle.set()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._editor = TextArea(self.history.current(), id="editor-area")
        yield self._editor
        self._stats_widget = Static("", id="stats-line")
        yield self._stats_widget
        yield Footer()

    def on_mount(self) -> None:
        self.history.defer = self._schedule_save
        hooks = SessionHooks(
            update_text=self._update_text,
            update_stats=self._update_stats,
            notify=self._notify,
            log=self._log_line,
        )
        self.session = NoteSession(
            self.history,
            hooks,
            export_dir=self.config.export_dir,
            export_extension=self.config.export_extension,
        )
        if self._editor:
            self._editor.focus()

    async def on_unmount(self) -> None:
        await asyncio.to_thread(
            self._saves_idle.wait, self.config.remote_timeout * 2
        )
        close = getattr(self.history.store, "close", None)
        if close is not None:
            close()

    def _schedule_save(self, job: SaveJob) -> None:
        # Saves carry full snapshots, so only the newest pending one matters.
        with self._save_lock:
            self._pending_save = job
            if not self._saves_idle.is_set():
                return
            self._saves_idle.clear()
        self.run_worker(self._drain_saves, thread=True, group="persist")

    def _drain_saves(self) -> None:
        while True:
            with self._save_lock:
                job = self._pending_save
                self._pending_save = None
                if job is None:
                    self._saves_idle.set()
                    return
            job()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if not self.session:
            return
        self._clear_armed = False
        self.session.handle_input(event.text_area.text)

    def action_undo(self) -> None:
        if self.session:
            self._clear_armed = False
            self.session.undo()

    def action_redo(self) -> None:
        if self.session:
            self._clear_armed = False
            self.session.redo()

    def action_export(self) -> None:
        if self.session:
            self.session.export()

    def action_clear(self) -> None:
        if not self.session:
            return
        self.session.clear(confirm=self._confirm_clear)

    def _confirm_clear(self) -> bool:
        if self._clear_armed:
            self._clear_armed = False
            return True
        self._clear_armed = True
        self._notify(
            "Press ctrl+l again to clear all notes. This cannot be undone.",
            NoticeLevel.WARNING,
        )
        return False

    def _update_text(self, text: str) -> None:
        if self._editor and self._editor.text != text:
            self._editor.load_text(text)

    def _update_stats(self, stats: NoteStats) -> None:
        self._ui.stats_text = f"{stats.summary()} | {stats.lines} lines"
        if self._stats_widget:
            self._stats_widget.update(self._ui.stats_text)

    def _notify(self, message: str, level: NoticeLevel) -> None:
        self._ui.last_notice = message
        self.notify(message, severity=SEVERITY[level], timeout=3.5)

    def _log_line(self, line: str) -> None:
        telemetry.get_logger().debug(f"session {line}")


def _history_limit(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError("must be 0 (unbounded) or a positive count")
    return value


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the note editor.")
    parser.add_argument(
        "--storage",
        choices=STORAGE_BACKENDS,
        help="Snapshot store backend (default: NOTE_ENGINE_STORAGE or 'local')",
    )
    parser.add_argument("--local-path", help="Path of the local key/value file")
    parser.add_argument("--remote-url", help="Base URL of the notes API")
    parser.add_argument("--export-dir", help="Directory exports are written to")
    parser.add_argument(
        "--history-limit",
        type=_history_limit,
        help="Maximum number of snapshots kept (0 or unset: unbounded)",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        help="Telemetry preset (default: NOTE_ENGINE_LOG_* environment)",
    )
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_env().replace(
        storage=args.storage,
        local_path=args.local_path,
        remote_url=args.remote_url,
        export_dir=args.export_dir,
        history_limit=args.history_limit or None,
    )
    if args.history_limit == 0:
        config = replace(config, history_limit=None)
    return config


def build_config(argv: Optional[Sequence[str]] = None) -> EngineConfig:
    return _config_from_args(_parse_args(argv))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = NoteEditorApp(config=_config_from_args(args))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
