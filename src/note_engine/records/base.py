"""Shared plumbing for the record books kept next to the notes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from note_engine.runtime import telemetry
from note_engine.storage.base import KeyValueStore, StorageError


@dataclass(frozen=True, slots=True)
class OperationResult:
    success: bool
    message: str
    # Set by upserts that replaced an existing record
    updated: bool = False


def load_json(kv: KeyValueStore, key: str, default: Any) -> Any:
    """Read and parse ``key``; unreadable or malformed data yields ``default``."""

    try:
        raw = kv.get_item(key)
    except StorageError as exc:
        telemetry.record_event(
            "records.load_failed",
            level="warning",
            data={"key": key, "backend": exc.backend, "error": str(exc)},
        )
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError as exc:
        telemetry.record_event(
            "storage.malformed",
            level="warning",
            data={"source": key, "reason": f"invalid json: {exc}"},
        )
        return default


def save_json(kv: KeyValueStore, key: str, value: Any) -> bool:
    try:
        kv.set_item(key, json.dumps(value, ensure_ascii=False))
    except StorageError as exc:
        telemetry.record_event(
            "records.persist_failed",
            level="warning",
            data={"key": key, "backend": exc.backend, "error": str(exc)},
        )
        return False
    return True


__all__ = ["OperationResult", "load_json", "save_json"]
