"""Primary store with a local cache used when the primary is unreachable."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from note_engine.runtime import telemetry

from .base import DEFAULT_SNAPSHOTS, SnapshotStore, StorageError


class FallbackStore:
    """Write-through cache in front of a primary store.

    The cache is never authoritative over a primary that answers: on load its
    richer history is kept only when its current text matches the primary's.
    When the primary fails, the cache serves loads and absorbs saves, and
    ``degraded`` stays set until a primary save succeeds again. A failing
    cache never keeps a save from reaching the primary.
    """

    def __init__(self, primary: SnapshotStore, cache: SnapshotStore) -> None:
        self.primary = primary
        self.cache = cache
        self.degraded = False

    def load(self) -> Tuple[str, ...]:
        try:
            remote = self.primary.load()
        except StorageError as exc:
            self._fell_back("load", exc)
            return self._cached() or DEFAULT_SNAPSHOTS

        cached = self._cached()
        if cached is not None and cached[-1] == remote[-1]:
            return cached
        return remote

    def save(self, snapshots: Sequence[str]) -> None:
        try:
            self.cache.save(snapshots)
        except StorageError as exc:
            self._log("cache_save", exc)
        try:
            self.primary.save(snapshots)
        except StorageError as exc:
            self._fell_back("save", exc)
            return
        self.degraded = False

    def close(self) -> None:
        for store in (self.primary, self.cache):
            close = getattr(store, "close", None)
            if close is not None:
                close()

    def _cached(self) -> Optional[Tuple[str, ...]]:
        try:
            return self.cache.load()
        except StorageError as exc:
            self._log("cache_load", exc)
            return None

    def _fell_back(self, operation: str, exc: StorageError) -> None:
        self.degraded = True
        self._log(operation, exc)

    def _log(self, operation: str, exc: StorageError) -> None:
        telemetry.record_event(
            "storage.fallback",
            level="warning",
            data={"operation": operation, "backend": exc.backend, "error": str(exc)},
        )


__all__ = ["FallbackStore"]
