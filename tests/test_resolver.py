import random
import sqlite3
import string
from pathlib import Path

import pytest

from conference_mapper.mapping.errors import StoreError
from conference_mapper.mapping.identifiers import IdentifierGenerator
from conference_mapper.mapping.resolver import (
    CREATED_MESSAGE,
    NO_INPUT_MESSAGE,
    NOT_FOUND_MESSAGE,
    RETRIEVED_MESSAGE,
    MappingResolver,
    ResolutionResult,
)
from conference_mapper.mapping.store import InMemoryMappingStore, SQLiteMappingStore


class FailingStore(InMemoryMappingStore):
    def get(self, mapping_id):
        raise StoreError("disk I/O error")

    def put(self, mapping_id, name):
        raise StoreError("disk I/O error")


@pytest.fixture
def store() -> InMemoryMappingStore:
    return InMemoryMappingStore()


@pytest.fixture
def resolver(store) -> MappingResolver:
    return MappingResolver(IdentifierGenerator(6), store)


def test_resolve_or_create_is_idempotent(resolver, store):
    first = resolver.resolve_or_create("room@conference.example.com")
    second = resolver.resolve_or_create("room@conference.example.com")

    assert first == second
    assert first.message == CREATED_MESSAGE
    assert len(store) == 1
    assert store.get(first.id) == "room@conference.example.com"


def test_round_trip_by_id(resolver):
    created = resolver.resolve_or_create("Standup@Conference.Example.com")
    fetched = resolver.resolve_by_id(created.id)

    assert fetched == ResolutionResult(
        id=created.id,
        name="standup@conference.example.com",
        message=RETRIEVED_MESSAGE,
    )


def test_case_variants_share_an_id(resolver):
    upper = resolver.resolve_or_create("Room@Conference.Example.Com")
    lower = resolver.resolve_or_create("room@conference.example.com")

    assert upper.id == lower.id
    assert upper.name == "room@conference.example.com"
    assert "@" in upper.name


def test_unknown_id_on_empty_store(resolver):
    assert resolver.resolve_by_id(999999) == ResolutionResult(
        id=999999, name="", message=NOT_FOUND_MESSAGE
    )


def test_no_input(resolver):
    expected = ResolutionResult(id=0, name="", message=NO_INPUT_MESSAGE)

    assert resolver.resolve(id=0, name="") == expected
    assert resolver.resolve() == expected
    assert resolver.resolve(id=-5) == expected


def test_name_takes_precedence_over_id(resolver):
    result = resolver.resolve(id=123456, name="room@conference.example.com")

    assert result.message == CREATED_MESSAGE
    assert result.name == "room@conference.example.com"
    assert result.id == IdentifierGenerator(6).generate("room@conference.example.com")


def test_collision_probes_next_candidate(store):
    generator = IdentifierGenerator(6)
    name = "room@conference.example.com"
    primary, secondary = list(generator.candidates(name, limit=2))
    store.put(primary, "squatter@conference.example.com")
    resolver = MappingResolver(generator, store)

    first = resolver.resolve_or_create(name)
    again = resolver.resolve_or_create(name)

    assert first.id == secondary
    assert again.id == secondary
    assert store.get(primary) == "squatter@conference.example.com"
    assert store.get(secondary) == name


def test_exhausted_candidates_fall_back_to_last_write_wins(store):
    generator = IdentifierGenerator(6)
    name = "room@conference.example.com"
    candidates = list(generator.candidates(name, limit=2))
    for index, candidate in enumerate(candidates):
        store.put(candidate, f"other{index}@conference.example.com")
    resolver = MappingResolver(generator, store, collision_attempts=2)

    result = resolver.resolve_or_create(name)

    assert result.id == candidates[0]
    assert store.get(candidates[0]) == name
    assert store.get(candidates[1]) == "other1@conference.example.com"


def test_name_path_store_failure_is_reported():
    resolver = MappingResolver(IdentifierGenerator(6), FailingStore())

    result = resolver.resolve_or_create("room@conference.example.com")

    assert result.id == 0
    assert result.name == ""
    assert "disk I/O error" in result.message


def test_id_path_store_failure_surfaces_error_text():
    resolver = MappingResolver(IdentifierGenerator(6), FailingStore())

    assert resolver.resolve_by_id(123456) == ResolutionResult(
        id=123456, name="", message="disk I/O error"
    )


def test_collision_attempts_must_be_positive(store):
    with pytest.raises(ValueError):
        MappingResolver(IdentifierGenerator(6), store, collision_attempts=0)


def test_thousand_random_names_get_distinct_round_trippable_ids(resolver, store):
    rng = random.Random(1234)
    alphabet = string.ascii_lowercase + string.digits
    names = {
        "".join(rng.choice(alphabet) for _ in range(12)) + "@conference.example.com"
        for _ in range(1000)
    }

    results = {name: resolver.resolve_or_create(name) for name in names}

    ids = [result.id for result in results.values()]
    assert all(100_000 <= value < 1_000_000 for value in ids)
    assert len(set(ids)) == len(names)
    assert len(store) == len(names)
    for name, result in results.items():
        assert resolver.resolve_by_id(result.id).name == name


def _seed_raw_row(path: Path, mapping_id: int, raw: bytes) -> None:
    conn = sqlite3.connect(str(path))
    conn.execute("INSERT INTO mappings (id, name) VALUES (?, ?)", (str(mapping_id), raw))
    conn.commit()
    conn.close()


def test_id_path_reports_undecodable_mapping(tmp_path: Path):
    path = tmp_path / "mapper.db"
    with SQLiteMappingStore(path) as store:
        _seed_raw_row(path, 123456, b"\xff\xfe")
        resolver = MappingResolver(IdentifierGenerator(6), store)

        result = resolver.resolve_by_id(123456)

    assert result.id == 123456
    assert result.name == ""
    assert result.message.startswith("Stored mapping for id 123456 is not valid UTF-8")


def test_name_path_overwrites_undecodable_primary_slot(tmp_path: Path):
    path = tmp_path / "mapper.db"
    name = "room@conference.example.com"
    generator = IdentifierGenerator(6)
    primary = generator.generate(name)
    with SQLiteMappingStore(path) as store:
        _seed_raw_row(path, primary, b"\xff\xfe")
        resolver = MappingResolver(generator, store)

        first = resolver.resolve_or_create(name)
        again = resolver.resolve_or_create(name)

        assert first == ResolutionResult(id=primary, name=name, message=CREATED_MESSAGE)
        assert again == first
        assert store.get(primary) == name
