"""
Table view controller: visibility toggle, rows, inline edit and delete.

At most one row is editable; that is the row whose id equals `editing_id`.
"""
from dataclasses import dataclass
from typing import Optional

from app.db.models import Person
from app.errors import PersonInputError
from app.services.notify import Notification, Notifier
from app.services.store import PersonStore
from app.services.validation import parse_person_input


@dataclass(frozen=True)
class Row:
    person: Person
    editing: bool


class TableViewController:
    def __init__(self, store: PersonStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier
        self.visible: bool = False
        self.editing_id: Optional[str] = None
        self.edit_name: str = ""
        self.edit_age: str = ""
        self._unsubscribe = store.subscribe(self._on_store_change)

    # -------------------- visibility --------------------
    def toggle(self) -> bool:
        self.visible = not self.visible
        return self.visible

    @property
    def toggle_label(self) -> str:
        verb = "Hide" if self.visible else "Show"
        return f"{verb} Database ({len(self.store)} records)"

    @property
    def toggle_icon(self) -> str:
        return "eye-off" if self.visible else "eye"

    # -------------------- rows --------------------
    @property
    def rows(self) -> list[Row]:
        return [Row(p, p.id == self.editing_id) for p in self.store.people]

    @property
    def is_empty(self) -> bool:
        return len(self.store) == 0

    # -------------------- delete --------------------
    def delete(self, person_id: str) -> None:
        self.store.remove(person_id)
        self.notifier.notify(Notification("Deleted", "Person removed from database"))

    # -------------------- edit --------------------
    def start_edit(self, person_id: str) -> bool:
        """Copy the row into the edit buffers. Unknown ids are ignored."""
        person = self.store.get(person_id)
        if person is None:
            return False
        self.editing_id = person.id
        self.edit_name = person.name
        self.edit_age = str(person.age)
        return True

    def save(self) -> Optional[Person]:
        """
        Validate the buffers and write them to the edited record.

        Validation failures keep edit mode and the buffers untouched.
        """
        if self.editing_id is None:
            return None
        try:
            name, age = parse_person_input(self.edit_name, self.edit_age)
        except PersonInputError as e:
            self.notifier.notify(Notification(e.title, e.description, "destructive"))
            return None

        person = self.store.update(self.editing_id, name, age)
        self._clear_edit()
        self.notifier.notify(Notification("Updated", "Person information updated successfully"))
        return person

    def cancel(self) -> None:
        self._clear_edit()

    def _clear_edit(self) -> None:
        self.editing_id = None
        self.edit_name = ""
        self.edit_age = ""

    def _on_store_change(self, people: list[Person]) -> None:
        # the edited record was removed underneath us
        if self.editing_id is not None and all(p.id != self.editing_id for p in people):
            self._clear_edit()

    def close(self) -> None:
        self._unsubscribe()
