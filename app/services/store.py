"""
Record store: the ordered list of Person records and its durable mirror.

Every successful mutation rewrites the whole collection to the slot before
listeners are told about it. There is no batching. Mutations are serialized
by a lock because FastAPI runs sync routes in a threadpool.
"""
import threading
from datetime import datetime
from typing import Callable, Optional
from pydantic import ValidationError

from app.config import DEFAULT_STORAGE_KEY
from app.db.models import Person, PeopleAdapter
from app.db.slot import DurableSlot
from app.logging_config import get_logger
from app.services.ids import CounterIds, IdFactory, uuid_ids

logger = get_logger(__name__)

Listener = Callable[[list[Person]], None]


class PersonStore:
    def __init__(
        self,
        slot: DurableSlot,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: IdFactory = uuid_ids,
        today: Optional[Callable[[], str]] = None,
        date_format: str = "%m/%d/%Y",
    ):
        self._slot = slot
        self.key = key
        self._new_id = id_factory
        self._today = today or (lambda: datetime.now().strftime(date_format))
        self._people: list[Person] = []
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        # Reason the last load() discarded stored data, None when it was fine
        self.load_error: Optional[str] = None

    # -------------------- queries --------------------
    @property
    def people(self) -> list[Person]:
        """Snapshot of the records in insertion order."""
        return list(self._people)

    def get(self, person_id: str) -> Optional[Person]:
        for person in self._people:
            if person.id == person_id:
                return person
        return None

    def __len__(self) -> int:
        return len(self._people)

    def __contains__(self, person_id: object) -> bool:
        return any(p.id == person_id for p in self._people)

    # -------------------- loading --------------------
    def load(self) -> list[Person]:
        """
        Hydrate from the slot.

        Missing data means an empty collection. Malformed data also yields an
        empty collection, but the reason is logged and kept on `load_error`.
        The slot is left as-is until the next mutation overwrites it.
        """
        with self._lock:
            self.load_error = None
            raw = self._slot.get(self.key)
            if raw is None:
                self._people = []
                return self.people

            try:
                people = PeopleAdapter.validate_json(raw)
            except ValidationError as e:
                return self._discard(f"{e.error_count()} invalid value(s) in stored records")

            ids = [p.id for p in people]
            if len(set(ids)) != len(ids):
                return self._discard("duplicate record ids in stored records")

            self._people = people
            if isinstance(self._new_id, CounterIds):
                self._new_id.advance_past(ids)
            logger.debug("Loaded %d people from slot %r", len(people), self.key)
            return self.people

    def _discard(self, reason: str) -> list[Person]:
        logger.warning("Ignoring stored data in slot %r: %s", self.key, reason)
        self.load_error = reason
        self._people = []
        return self.people

    # -------------------- mutations --------------------
    def add(self, name: str, age: int) -> Person:
        with self._lock:
            person = Person(id=self._fresh_id(), name=name, age=age, created_at=self._today())
            self._people.append(person)
            self._commit()
        logger.debug("Added person %s", person.id)
        return person

    def update(self, person_id: str, name: str, age: int) -> Optional[Person]:
        """Replace name/age of a record; id and createdAt are kept. No-op if absent."""
        with self._lock:
            for idx, person in enumerate(self._people):
                if person.id == person_id:
                    updated = Person(id=person.id, name=name, age=age, created_at=person.created_at)
                    self._people[idx] = updated
                    self._commit()
                    logger.debug("Updated person %s", person_id)
                    return updated
        return None

    def remove(self, person_id: str) -> bool:
        """Delete a record. Returns False (and writes nothing) if it was absent."""
        with self._lock:
            remaining = [p for p in self._people if p.id != person_id]
            if len(remaining) == len(self._people):
                return False
            self._people = remaining
            self._commit()
        logger.debug("Removed person %s", person_id)
        return True

    # -------------------- change notification --------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(snapshot)` after every write; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------- internals --------------------
    def _fresh_id(self) -> str:
        while True:
            candidate = self._new_id()
            if candidate not in self:
                return candidate

    def _commit(self) -> None:
        self._slot.set(self.key, self.serialize())
        snapshot = self.people
        for listener in list(self._listeners):
            listener(snapshot)

    def serialize(self) -> str:
        """JSON array of {id, name, age, createdAt} objects."""
        return PeopleAdapter.dump_json(self._people, by_alias=True).decode("utf-8")
