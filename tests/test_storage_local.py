from __future__ import annotations

import json
from pathlib import Path

import pytest

from note_engine.history import NoteHistory
from note_engine.runtime.config import ConfigError, EngineConfig
from note_engine.storage import (
    DEFAULT_SNAPSHOTS,
    FallbackStore,
    KeyValueFile,
    LocalSnapshotStore,
    MemoryStore,
    StorageError,
    decode_snapshots,
    open_store,
)


def make_store(tmp_path: Path, key: str = "editor") -> LocalSnapshotStore:
    return LocalSnapshotStore.at(tmp_path / "storage.json", key=key)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{}",
        "[]",
        '["ok", 3]',
        '"just a string"',
    ],
)
def test_decode_malformed_values_fall_back(raw: str) -> None:
    assert decode_snapshots(raw, source="test") == DEFAULT_SNAPSHOTS


def test_decode_missing_value_is_default() -> None:
    assert decode_snapshots(None, source="test") == ("",)


def test_decode_valid_sequence() -> None:
    assert decode_snapshots('["", "a"]', source="test") == ("", "a")


def test_local_store_starts_empty(tmp_path: Path) -> None:
    store = make_store(tmp_path)

    assert store.load() == ("",)


def test_local_store_round_trips_unicode(tmp_path: Path) -> None:
    store = make_store(tmp_path)

    store.save(["", "café ✓", "line\nbreak"])

    assert make_store(tmp_path).load() == ("", "café ✓", "line\nbreak")


def test_keys_are_isolated(tmp_path: Path) -> None:
    notes = make_store(tmp_path, key="editor")
    other = make_store(tmp_path, key="scratch")

    notes.save(["", "mine"])
    other.save(["", "theirs"])

    assert notes.load() == ("", "mine")
    assert other.load() == ("", "theirs")
    assert set(notes.kv.keys()) == {"editor", "scratch"}


def test_corrupt_file_is_treated_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    store = LocalSnapshotStore.at(path)

    assert store.load() == ("",)

    store.save(["", "recovered"])
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "editor": '["", "recovered"]'
    }


def test_malformed_entry_recovers_history(tmp_path: Path) -> None:
    kv = KeyValueFile(tmp_path / "storage.json")
    kv.set_item("editor", "{not a list}")

    history = NoteHistory.open(LocalSnapshotStore(kv))

    assert history.snapshots == ("",)


def test_kv_remove_and_clear(tmp_path: Path) -> None:
    kv = KeyValueFile(tmp_path / "nested" / "storage.json")
    kv.set_item("a", "1")
    kv.set_item("b", "2")

    kv.remove_item("a")
    assert kv.get_item("a") is None
    assert kv.get_item("b") == "2"

    kv.clear()
    assert kv.keys() == ()


def test_history_persists_through_local_store(tmp_path: Path) -> None:
    history = NoteHistory(store=make_store(tmp_path))
    history.commit("first")
    history.commit("second")
    history.undo()

    restored = NoteHistory.open(make_store(tmp_path))

    assert restored.snapshots == ("", "first")


def test_open_store_selects_backend(tmp_path: Path) -> None:
    local_path = str(tmp_path / "storage.json")

    assert isinstance(open_store(EngineConfig(storage="memory")), MemoryStore)
    assert isinstance(
        open_store(EngineConfig(storage="local", local_path=local_path)),
        LocalSnapshotStore,
    )
    remote = open_store(EngineConfig(storage="remote", local_path=local_path))
    assert isinstance(remote, FallbackStore)
    assert isinstance(remote.cache, LocalSnapshotStore)


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ConfigError):
        EngineConfig(storage="cloud")


def test_failed_write_leaves_no_temp_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    kv = KeyValueFile(tmp_path / "storage.json")
    kv.set_item("editor", '[""]')

    def refuse(src: str, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("note_engine.storage.local.os.replace", refuse)

    with pytest.raises(StorageError):
        kv.set_item("editor", '["", "lost"]')
    assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]
    assert kv.get_item("editor") == '[""]'


def test_unreadable_path_opens_empty_history(tmp_path: Path) -> None:
    blocked = tmp_path / "storage.json"
    blocked.mkdir()

    history = NoteHistory.open(LocalSnapshotStore.at(blocked))

    assert history.snapshots == ("",)
    assert history.commit("still editable").changed is True
    assert history.current() == "still editable"
