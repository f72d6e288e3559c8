"""Note editing surface: statistics, export, and the session controller."""

from .export import EmptyExportError, NoteExport, build_export, export_filename, write_export
from .session import NoteSession, NoticeLevel, SessionHooks
from .stats import NoteStats, compute_stats

__all__ = [
    "EmptyExportError",
    "NoteExport",
    "NoteSession",
    "NoteStats",
    "NoticeLevel",
    "SessionHooks",
    "build_export",
    "compute_stats",
    "export_filename",
    "write_export",
]
