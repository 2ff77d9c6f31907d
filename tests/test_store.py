"""
Tests for the record store and its durable slot mirror.
"""
import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlmodel import create_engine, SQLModel

from app.config import DEFAULT_STORAGE_KEY
from app.db.slot import MemorySlot, SQLiteSlot
from app.services.ids import CounterIds, sequence_key
from app.services.store import PersonStore

TODAY = "10/18/2026"


def stored(slot):
    """Decode what the store last wrote."""
    return json.loads(slot.get(DEFAULT_STORAGE_KEY))


def test_load_without_data_starts_empty(store):
    assert store.people == []
    assert store.load_error is None


def test_add_appends_and_persists(store, slot):
    """Add assigns an id and today's date and writes the whole collection."""
    alice = store.add("Alice", 30)

    assert len(store) == 1
    assert alice.id == "1"
    assert alice.name == "Alice"
    assert alice.age == 30
    assert alice.created_at == TODAY
    assert stored(slot) == [
        {"id": "1", "name": "Alice", "age": 30, "createdAt": TODAY}
    ]


def test_insertion_order_is_display_order(store):
    for name in ["Carol", "Alice", "Bob"]:
        store.add(name, 20)

    assert [p.name for p in store.people] == ["Carol", "Alice", "Bob"]


def test_ids_are_unique_under_rapid_adds(slot):
    """Ids do not depend on the clock."""
    s = PersonStore(slot)
    people = [s.add(f"P{i}", i) for i in range(50)]

    assert len({p.id for p in people}) == 50


def test_fresh_id_skips_ids_already_present(slot):
    slot.set(DEFAULT_STORAGE_KEY, json.dumps([
        {"id": "1", "name": "Old", "age": 1, "createdAt": "01/01/2026"},
    ]))
    s = PersonStore(slot, id_factory=CounterIds())
    s.load()

    assert s.add("New", 2).id == "2"


def test_update_keeps_id_and_created_at(slot):
    s = PersonStore(slot, id_factory=CounterIds(), today=lambda: "01/01/2026")
    carol = s.add("Carol", 40)
    s._today = lambda: "12/31/2026"

    updated = s.update(carol.id, "Caroline", 41)

    assert updated.id == carol.id
    assert updated.created_at == "01/01/2026"
    assert (updated.name, updated.age) == ("Caroline", 41)
    assert len(s) == 1
    assert stored(slot)[0]["age"] == 41


def test_update_missing_id_is_noop(store, slot):
    store.add("Alice", 30)
    before = slot.get(DEFAULT_STORAGE_KEY)

    assert store.update("nope", "X", 1) is None
    assert slot.get(DEFAULT_STORAGE_KEY) == before
    assert store.people[0].name == "Alice"


def test_remove_is_idempotent(store):
    alice = store.add("Alice", 30)
    store.add("Bob", 25)

    assert store.remove(alice.id) is True
    assert store.remove(alice.id) is False
    assert [p.name for p in store.people] == ["Bob"]


def test_remove_last_record_writes_empty_list(store, slot):
    alice = store.add("Alice", 30)
    store.remove(alice.id)

    assert stored(slot) == []


def test_round_trip_reproduces_records(store, slot):
    """A fresh store over the same slot sees the same ordered list."""
    store.add("Alice", 30)
    store.add("Bob", 25)
    bob = store.people[1]
    store.update(bob.id, "Robert", 26)

    reloaded = PersonStore(slot)
    reloaded.load()

    assert reloaded.people == store.people


def test_people_snapshot_is_a_copy(store):
    store.add("Alice", 30)
    snapshot = store.people
    snapshot.clear()

    assert len(store) == 1


def test_get_and_contains(store):
    alice = store.add("Alice", 30)

    assert store.get(alice.id) == alice
    assert store.get("missing") is None
    assert alice.id in store
    assert "missing" not in store


def test_custom_storage_key(slot):
    s = PersonStore(slot, key="otherKey")
    s.add("Alice", 30)

    assert slot.get("otherKey") is not None
    assert slot.get(DEFAULT_STORAGE_KEY) is None


@pytest.mark.parametrize("raw", [
    "not json",
    "{\"id\": \"1\"}",
    "[{\"id\": \"1\", \"name\": \"\", \"age\": 3, \"createdAt\": \"x\"}]",
    "[{\"id\": \"1\", \"name\": \"A\", \"age\": -1, \"createdAt\": \"x\"}]",
    "[{\"id\": \"1\", \"name\": \"A\", \"age\": \"3\", \"createdAt\": \"x\"}]",
    "[{\"id\": \"1\", \"name\": \"A\", \"age\": 3}]",
])
def test_malformed_data_falls_back_to_empty(raw, caplog):
    """Corrupt payloads load as empty, with a warning and a recorded reason."""
    slot = MemorySlot({DEFAULT_STORAGE_KEY: raw})
    s = PersonStore(slot)

    with caplog.at_level("WARNING"):
        people = s.load()

    assert people == []
    assert s.load_error
    assert "Ignoring stored data" in caplog.text
    # Left untouched until the next mutation
    assert slot.get(DEFAULT_STORAGE_KEY) == raw


def test_duplicate_ids_are_malformed():
    record = {"id": "1", "name": "A", "age": 3, "createdAt": "x"}
    slot = MemorySlot({DEFAULT_STORAGE_KEY: json.dumps([record, record])})
    s = PersonStore(slot)
    s.load()

    assert s.people == []
    assert "duplicate" in s.load_error


def test_mutation_after_corrupt_load_overwrites_slot():
    slot = MemorySlot({DEFAULT_STORAGE_KEY: "garbage"})
    s = PersonStore(slot, id_factory=CounterIds())
    s.load()
    s.add("Alice", 30)

    assert [p["name"] for p in stored(slot)] == ["Alice"]


def test_successful_reload_clears_load_error():
    slot = MemorySlot({DEFAULT_STORAGE_KEY: "garbage"})
    s = PersonStore(slot)
    s.load()
    slot.set(DEFAULT_STORAGE_KEY, "[]")
    s.load()

    assert s.load_error is None


def test_subscribers_see_each_write(store):
    seen = []
    unsubscribe = store.subscribe(lambda people: seen.append([p.name for p in people]))

    alice = store.add("Alice", 30)
    store.update(alice.id, "Alicia", 31)
    store.remove("missing")
    store.remove(alice.id)
    unsubscribe()
    store.add("Bob", 25)

    assert seen == [["Alice"], ["Alicia"], []]


def test_counter_ids_not_reused_after_restart(slot):
    """The newest id is remembered even after its record is deleted."""
    def open_store():
        s = PersonStore(
            slot,
            id_factory=CounterIds(slot=slot, key=sequence_key(DEFAULT_STORAGE_KEY)),
            today=lambda: TODAY,
        )
        s.load()
        return s

    first = open_store()
    for name in ["A", "B", "C"]:
        first.add(name, 1)
    first.remove("3")

    second = open_store()
    assert second.add("D", 1).id == "4"
    assert slot.get(sequence_key(DEFAULT_STORAGE_KEY)) == "4"


def test_counter_ids_continue_after_stored_ids_without_sequence(slot):
    """Data written without a sequence key still seeds the counter."""
    slot.set(DEFAULT_STORAGE_KEY, json.dumps([
        {"id": "7", "name": "Old", "age": 1, "createdAt": "01/01/2026"},
        {"id": "x9", "name": "Odd", "age": 1, "createdAt": "01/01/2026"},
    ]))
    s = PersonStore(slot, id_factory=CounterIds(slot=slot, key=sequence_key(DEFAULT_STORAGE_KEY)))
    s.load()

    assert s.add("New", 2).id == "8"


def test_concurrent_adds_are_all_persisted(tmp_path):
    """Parallel requests against a fresh database neither fail nor lose writes."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'people.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    slot = SQLiteSlot(engine)
    s = PersonStore(slot, id_factory=CounterIds(), today=lambda: TODAY)
    s.load()

    with ThreadPoolExecutor(max_workers=8) as pool:
        people = list(pool.map(lambda i: s.add(f"P{i}", i), range(40)))

    assert len({p.id for p in people}) == 40
    assert len(s) == 40
    assert sorted(p["name"] for p in stored(slot)) == sorted(f"P{i}" for i in range(40))
    engine.dispose()
