"""File-backed key/value storage, the desktop stand-in for browser localStorage."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from note_engine.runtime import telemetry

from .base import StorageError, decode_snapshots, encode_snapshots

BACKEND = "local"


class KeyValueFile:
    """A JSON object on disk mapping string keys to string values.

    Every write rewrites the whole file through a temp file and ``os.replace``
    so a crash never leaves a half-written document behind.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)

    def clear(self) -> None:
        self._write({})

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._read())

    def _read(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(
                f"Could not read {self.path}: {exc}", backend=BACKEND
            ) from exc

        try:
            data = json.loads(raw)
        except ValueError as exc:
            self._unreadable(f"invalid json: {exc}")
            return {}
        if not isinstance(data, dict):
            self._unreadable(f"expected an object, got {type(data).__name__}")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: Dict[str, str]) -> None:
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(
                f"Could not write {self.path}: {exc}", backend=BACKEND
            ) from exc

    def _unreadable(self, reason: str) -> None:
        telemetry.record_event(
            "storage.malformed",
            level="warning",
            data={"source": str(self.path), "reason": reason},
        )


class LocalSnapshotStore:
    """Keeps the snapshot sequence as a JSON array under one key."""

    def __init__(self, kv: KeyValueFile, *, key: str = "editor") -> None:
        self.kv = kv
        self.key = key

    @classmethod
    def at(cls, path: str | os.PathLike[str], *, key: str = "editor") -> "LocalSnapshotStore":
        return cls(KeyValueFile(path), key=key)

    def load(self) -> Tuple[str, ...]:
        return decode_snapshots(
            self.kv.get_item(self.key), source=f"{self.kv.path}#{self.key}"
        )

    def save(self, snapshots: Sequence[str]) -> None:
        self.kv.set_item(self.key, encode_snapshots(snapshots))


__all__ = ["KeyValueFile", "LocalSnapshotStore"]
