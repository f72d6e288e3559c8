"""Snapshot persistence backends."""

from .base import (
    DEFAULT_SNAPSHOTS,
    KeyValueStore,
    SnapshotStore,
    StorageError,
    decode_snapshots,
    encode_snapshots,
)
from .factory import open_key_value, open_store
from .fallback import FallbackStore
from .local import KeyValueFile, LocalSnapshotStore
from .memory import MemoryKeyValue, MemoryStore
from .remote import RemoteNoteStore

__all__ = [
    "DEFAULT_SNAPSHOTS",
    "FallbackStore",
    "KeyValueFile",
    "KeyValueStore",
    "LocalSnapshotStore",
    "MemoryKeyValue",
    "MemoryStore",
    "RemoteNoteStore",
    "SnapshotStore",
    "StorageError",
    "decode_snapshots",
    "encode_snapshots",
    "open_key_value",
    "open_store",
]
