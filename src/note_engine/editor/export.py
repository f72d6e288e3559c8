"""Downloadable note artifacts named after the calendar date."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path


class EmptyExportError(ValueError):
    """Raised when asked to export notes that hold only whitespace."""


@dataclass(frozen=True, slots=True)
class NoteExport:
    filename: str
    content: str
    media_type: str = "text/plain"


def export_filename(day: date, extension: str = "txt") -> str:
    ext = extension.strip().lstrip(".")
    if not ext:
        raise ValueError("Export extension must not be empty")
    return f"notes_{day.isoformat()}.{ext}"


def build_export(text: str, *, day: date, extension: str = "txt") -> NoteExport:
    if not text.strip():
        raise EmptyExportError("Cannot export empty notes")
    return NoteExport(filename=export_filename(day, extension), content=text)


def write_export(export: NoteExport, directory: str | os.PathLike[str]) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export.filename
    # newline="" keeps the text byte-for-byte, no platform newline translation
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(export.content)
    return path
