"""
Record id factories injected into the record store.

Both strategies are independent of wall-clock time, so rapid successive
adds never collide.
"""
from typing import Callable, Iterable, Optional
from uuid import uuid4

from app.db.slot import DurableSlot

IdFactory = Callable[[], str]


def uuid_ids() -> str:
    """Random 32-char hex id."""
    return uuid4().hex


def sequence_key(storage_key: str) -> str:
    """Slot key holding the last counter id issued for a collection."""
    return f"{storage_key}:lastId"


class CounterIds:
    """
    Monotonic counter ids: "1", "2", ...

    With a slot, the last issued number is persisted under its own key so a
    restarted process continues after it, even when the record holding the
    highest id was deleted.
    """

    def __init__(self, start: int = 1, slot: Optional[DurableSlot] = None, key: Optional[str] = None):
        self._next = start
        self._slot = slot
        self._key = key
        if slot is not None and key is not None:
            last = slot.get(key)
            if last is not None and _is_number(last):
                self._next = max(self._next, int(last) + 1)

    def advance_past(self, ids: Iterable[str]) -> None:
        """Make sure the next id is above every numeric id given."""
        numbers = [int(i) for i in ids if _is_number(i)]
        if numbers:
            self._next = max(self._next, max(numbers) + 1)

    def __call__(self) -> str:
        value = self._next
        self._next += 1
        if self._slot is not None and self._key is not None:
            self._slot.set(self._key, str(value))
        return str(value)


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def make_id_factory(strategy: str, slot: Optional[DurableSlot] = None, storage_key: Optional[str] = None) -> IdFactory:
    """Build the id factory named by the ID_STRATEGY setting."""
    if strategy == "uuid":
        return uuid_ids
    if strategy == "counter":
        if slot is None or storage_key is None:
            return CounterIds()
        return CounterIds(slot=slot, key=sequence_key(storage_key))
    raise ValueError(f"Unknown id strategy: {strategy}")
