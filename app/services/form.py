"""Add-person form: two text buffers and the add action."""
from typing import Optional

from app.db.models import Person
from app.errors import PersonInputError
from app.services.notify import Notification, Notifier
from app.services.store import PersonStore
from app.services.validation import parse_person_input


class FormController:
    def __init__(self, store: PersonStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier
        self.name: str = ""
        self.age: str = ""

    def submit(self) -> Optional[Person]:
        """
        Validate the buffers and add a person.

        On failure the buffers are left as typed and a destructive toast is
        sent; on success the buffers are cleared.
        """
        try:
            name, age = parse_person_input(self.name, self.age)
        except PersonInputError as e:
            self.notifier.notify(Notification(e.title, e.description, "destructive"))
            return None

        person = self.store.add(name, age)
        self.name = ""
        self.age = ""
        self.notifier.notify(
            Notification("Success", f"{person.name} has been added to the database!")
        )
        return person
