"""Textual host for the note editor."""

from .app import NoteEditorApp, build_config, main

__all__ = ["NoteEditorApp", "build_config", "main"]
