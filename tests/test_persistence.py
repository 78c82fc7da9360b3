"""Tests for PersistenceAdapter's silent-fallback load/save."""

from __future__ import annotations

import pytest

from serenemind.models import LogEntry
from serenemind.persistence import COUNTER_KEY, ENTRIES_KEY, PersistenceAdapter
from serenemind.storage import JsonFileStorage, KeyValueStorage, MemoryStorage


class BrokenStorage(KeyValueStorage):
    def get(self, key):
        raise OSError("disk on fire")

    def set(self, key, value):
        raise OSError("disk on fire")


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


def test_fresh_storage_loads_empty_and_zero(storage):
    p = PersistenceAdapter(storage)
    assert p.load() == []
    assert p.load_counter() == 0


def test_roundtrip_entries(storage):
    p = PersistenceAdapter(storage)
    entries = [LogEntry.create("a"), LogEntry.create("b"), LogEntry.create("c")]
    p.save(entries)
    assert p.load() == entries


def test_roundtrip_empty_collection(storage):
    p = PersistenceAdapter(storage)
    p.save([])
    assert storage.get(ENTRIES_KEY) == b"[]"
    assert p.load() == []


def test_roundtrip_through_json_file(tmp_path):
    path = tmp_path / "data.json"
    entries = [LogEntry.create("first"), LogEntry.create("second")]
    PersistenceAdapter(JsonFileStorage(path)).save(entries)
    assert PersistenceAdapter(JsonFileStorage(path)).load() == entries


def test_malformed_entries_fall_back_to_empty(storage, caplog):
    storage.set(ENTRIES_KEY, b"{broken")
    assert PersistenceAdapter(storage).load() == []
    assert "Ignoring unreadable" in caplog.text


def test_counter_roundtrip(storage):
    p = PersistenceAdapter(storage)
    p.save_counter(4)
    assert storage.get(COUNTER_KEY) == b"4"
    assert p.load_counter() == 4


@pytest.mark.parametrize("raw", [b"", b"four", b"\xff", b"1.5"])
def test_malformed_counter_is_zero(storage, raw):
    storage.set(COUNTER_KEY, raw)
    assert PersistenceAdapter(storage).load_counter() == 0


def test_negative_counter_clamps_to_zero(storage):
    storage.set(COUNTER_KEY, b"-3")
    assert PersistenceAdapter(storage).load_counter() == 0


def test_counter_independent_of_entries(storage):
    p = PersistenceAdapter(storage)
    p.save_counter(9)
    assert p.load() == []
    assert p.load_counter() == 9


def test_broken_storage_never_raises():
    p = PersistenceAdapter(BrokenStorage())
    assert p.load() == []
    assert p.load_counter() == 0
    p.save([LogEntry.create("x")])
    p.save_counter(1)
