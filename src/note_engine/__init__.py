"""UI-agnostic note editing engine with snapshot undo/redo."""

__all__ = [
    "adapters",
    "editor",
    "history",
    "runtime",
    "storage",
]

__version__ = "0.1.0"
