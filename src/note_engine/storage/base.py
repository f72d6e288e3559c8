"""Persistence contract shared by every snapshot store."""

from __future__ import annotations

import json
from typing import Optional, Protocol, Sequence, Tuple

from note_engine.runtime import telemetry

DEFAULT_SNAPSHOTS: Tuple[str, ...] = ("",)


class SnapshotStore(Protocol):
    """Anything that can restore and persist a snapshot sequence."""

    def load(self) -> Tuple[str, ...]:
        """Return the saved sequence, or ``DEFAULT_SNAPSHOTS`` if none exists."""
        ...

    def save(self, snapshots: Sequence[str]) -> None:
        """Persist ``snapshots``; may raise :class:`StorageError`."""
        ...


class KeyValueStore(Protocol):
    """String-keyed storage shaped like browser localStorage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class StorageError(RuntimeError):
    """Raised when a backing medium cannot be read or written."""

    def __init__(self, message: str, *, backend: str | None = None) -> None:
        super().__init__(message)
        self.backend = backend


def decode_snapshots(raw: Optional[str], *, source: str) -> Tuple[str, ...]:
    """Parse a stored JSON array of strings, falling back to the default.

    A missing value is normal on first start. Anything else that is not a
    non-empty list of strings is logged and replaced by the default.
    """

    if raw is None:
        return DEFAULT_SNAPSHOTS
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        _malformed(source, f"invalid json: {exc}")
        return DEFAULT_SNAPSHOTS
    return validate_snapshots(parsed, source=source)


def validate_snapshots(value: object, *, source: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not value:
        _malformed(source, f"expected a non-empty list, got {type(value).__name__}")
        return DEFAULT_SNAPSHOTS
    if not all(isinstance(item, str) for item in value):
        _malformed(source, "non-string snapshot")
        return DEFAULT_SNAPSHOTS
    return tuple(value)


def encode_snapshots(snapshots: Sequence[str]) -> str:
    return json.dumps(list(snapshots), ensure_ascii=False)


def _malformed(source: str, reason: str) -> None:
    telemetry.record_event(
        "storage.malformed",
        level="warning",
        data={"source": source, "reason": reason},
    )


__all__ = [
    "DEFAULT_SNAPSHOTS",
    "KeyValueStore",
    "SnapshotStore",
    "StorageError",
    "decode_snapshots",
    "encode_snapshots",
    "validate_snapshots",
]
