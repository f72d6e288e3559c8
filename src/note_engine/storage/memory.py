"""In-process stores."""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from .base import DEFAULT_SNAPSHOTS


class MemoryStore:
    def __init__(self, snapshots: Optional[Sequence[str]] = None) -> None:
        self._snapshots: Optional[Tuple[str, ...]] = (
            tuple(snapshots) if snapshots else None
        )
        self.save_count = 0

    def load(self) -> Tuple[str, ...]:
        return self._snapshots or DEFAULT_SNAPSHOTS

    def save(self, snapshots: Sequence[str]) -> None:
        self._snapshots = tuple(snapshots)
        self.save_count += 1

    @property
    def saved(self) -> Optional[Tuple[str, ...]]:
        return self._snapshots


class MemoryKeyValue:
    """Dict-backed :class:`~note_engine.storage.base.KeyValueStore`."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
