"""Build the snapshot store an :class:`EngineConfig` asks for."""

from __future__ import annotations

from note_engine.runtime.config import ConfigError, EngineConfig

from .base import KeyValueStore, SnapshotStore
from .fallback import FallbackStore
from .local import KeyValueFile, LocalSnapshotStore
from .memory import MemoryKeyValue, MemoryStore
from .remote import RemoteNoteStore


def open_store(config: EngineConfig) -> SnapshotStore:
    if config.storage == "memory":
        return MemoryStore()
    local = LocalSnapshotStore.at(config.local_path, key=config.storage_key)
    if config.storage == "local":
        return local
    if config.storage == "remote":
        remote = RemoteNoteStore(config.remote_url, timeout=config.remote_timeout)
        return FallbackStore(remote, local)
    raise ConfigError(f"Unknown storage backend '{config.storage}'", key="storage")


def open_key_value(config: EngineConfig) -> KeyValueStore:
    """Key/value store shared by the record books (tasks, contacts, visitors)."""

    if config.storage == "memory":
        return MemoryKeyValue()
    return KeyValueFile(config.local_path)


__all__ = ["open_key_value", "open_store"]
