"""
Dependency injection for FastAPI routes.
Builds the record store and controllers once and hands them to routes.
"""
from dataclasses import dataclass
from typing import Annotated
from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.db.slot import DurableSlot, MemorySlot, SQLiteSlot
from app.db.sqlite import get_engine, init_db
from app.logging_config import get_logger
from app.services.form import FormController
from app.services.ids import make_id_factory
from app.services.notify import Notification, NotificationQueue
from app.services.store import PersonStore
from app.services.table import TableViewController

logger = get_logger(__name__)


# === Application Components ===

@dataclass
class PeopleUI:
    """Everything one running page needs, wired around a single store."""
    store: PersonStore
    notifications: NotificationQueue
    form: FormController
    table: TableViewController


def build_slot(settings: Settings) -> DurableSlot:
    """Create the durable slot for the configured DATABASE_URL."""
    if settings.uses_memory_storage:
        return MemorySlot()
    init_db()
    return SQLiteSlot(get_engine())


def build_store(settings: Settings, slot: DurableSlot | None = None) -> PersonStore:
    """
    Create and hydrate the record store.

    Usage:
        store = build_store(get_settings())
        store.add("Alice", 30)
    """
    if slot is None:
        slot = build_slot(settings)
    store = PersonStore(
        slot,
        key=settings.STORAGE_KEY,
        id_factory=make_id_factory(settings.ID_STRATEGY, slot, settings.STORAGE_KEY),
        date_format=settings.DATE_FORMAT,
    )
    store.load()
    logger.info("Loaded %d people from %r", len(store), settings.STORAGE_KEY)
    return store


def build_ui(settings: Settings, slot: DurableSlot | None = None) -> PeopleUI:
    """Create store, notification queue and both controllers."""
    store = build_store(settings, slot)
    notifications = NotificationQueue()
    if store.load_error:
        notifications.notify(Notification(
            "Warning",
            "Saved records could not be read, starting with an empty database",
            "warning",
        ))
    return PeopleUI(
        store=store,
        notifications=notifications,
        form=FormController(store, notifications),
        table=TableViewController(store, notifications),
    )


def get_ui(request: Request) -> PeopleUI:
    """The PeopleUI built by the application lifespan."""
    return request.app.state.ui


# === Type Aliases ===

UIDep = Annotated[PeopleUI, Depends(get_ui)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
