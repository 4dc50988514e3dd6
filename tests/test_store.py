import sqlite3
from pathlib import Path

import pytest

from conference_mapper.mapping.errors import MappingDecodeError, StoreError
from conference_mapper.mapping.store import (
    InMemoryMappingStore,
    MappingStore,
    SQLiteMappingStore,
)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        backend = InMemoryMappingStore()
    else:
        backend = SQLiteMappingStore(tmp_path / "mapper.db")
    yield backend
    backend.close()


def test_store_satisfies_protocol(store):
    assert isinstance(store, MappingStore)


def test_get_missing_returns_none(store):
    assert store.get(123456) is None
    assert len(store) == 0


def test_put_then_get_and_overwrite(store):
    store.put(123456, "room@conference.example.com")
    assert store.get(123456) == "room@conference.example.com"

    store.put(123456, "other@conference.example.com")
    assert store.get(123456) == "other@conference.example.com"
    assert len(store) == 1


def test_items_lists_every_mapping(store):
    store.put(111111, "a@x")
    store.put(222222, "b@x")

    assert sorted(store.items()) == [(111111, "a@x"), (222222, "b@x")]


def test_sqlite_store_persists_across_reopen(tmp_path: Path):
    path = tmp_path / "nested" / "mapper.db"
    with SQLiteMappingStore(path) as first:
        first.put(654321, "room@conference.example.com")

    with SQLiteMappingStore(path) as second:
        assert second.get(654321) == "room@conference.example.com"


def test_sqlite_store_keys_are_decimal_strings(tmp_path: Path):
    path = tmp_path / "mapper.db"
    with SQLiteMappingStore(path) as store:
        store.put(100200, "room@x")

    conn = sqlite3.connect(str(path))
    try:
        rows = conn.execute("SELECT id, name FROM mappings").fetchall()
    finally:
        conn.close()
    assert rows == [("100200", b"room@x")]


def test_undecodable_value_raises_typed_error(tmp_path: Path):
    path = tmp_path / "mapper.db"
    store = SQLiteMappingStore(path)
    conn = sqlite3.connect(str(path))
    conn.execute("INSERT INTO mappings (id, name) VALUES (?, ?)", ("123456", b"\xff\xfe"))
    conn.commit()
    conn.close()

    with pytest.raises(MappingDecodeError) as excinfo:
        store.get(123456)
    assert isinstance(excinfo.value, StoreError)
    assert excinfo.value.key == "123456"
    store.close()


def test_closed_store_raises_store_error(tmp_path: Path):
    store = SQLiteMappingStore(tmp_path / "mapper.db")
    store.close()

    with pytest.raises(StoreError):
        store.get(123456)
    with pytest.raises(StoreError):
        store.put(123456, "room@x")


def test_unopenable_path_raises_store_error(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(StoreError):
        SQLiteMappingStore(blocker / "mapper.db")
