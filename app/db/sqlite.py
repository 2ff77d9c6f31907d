"""
Database initialization and health utilities.
"""
from typing import Any, Optional
from pathlib import Path
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session, select, func

from app.config import get_settings
from app.db.models import StorageSlot


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the SQLModel engine for the configured DATABASE_URL."""
    global _engine
    if _engine is None:
        settings = get_settings()

        # Ensure data directory exists
        if settings.DATABASE_URL.startswith("sqlite:///"):
            db_path = Path(settings.DATABASE_URL.replace("sqlite:///", ""))
            db_path.parent.mkdir(parents=True, exist_ok=True)

        _engine = create_engine(
            settings.DATABASE_URL,
            connect_args={
                "check_same_thread": False,
                "timeout": 30.0,
            } if "sqlite" in settings.DATABASE_URL else {},
            echo=False,
            pool_pre_ping=True,
        )
    return _engine


def dispose_engine() -> None:
    """
    Drop the cached engine.
    Needed after reload_settings() points DATABASE_URL somewhere else.
    """
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


def init_db(drop_all: bool = False) -> None:
    """
    Initialize database schema.

    Args:
        drop_all: If True, drop all tables before creating (DESTRUCTIVE!)

    Usage:
        # First time setup
        from app.db.sqlite import init_db
        init_db()

        # Reset database (lose all data!)
        init_db(drop_all=True)
    """
    engine = get_engine()

    if drop_all:
        SQLModel.metadata.drop_all(engine)

    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """
    Get a database session (for use outside of FastAPI context).

    Use as context manager:
        with get_session() as session:
            # do work
            session.commit()
    """
    return Session(get_engine())


def check_db_health() -> dict[str, Any]:
    """
    Check database connectivity and get basic stats.

    Returns:
        Dict with status and slot count
    """
    settings = get_settings()
    if settings.uses_memory_storage:
        return {"status": "healthy", "backend": "memory"}

    try:
        with get_session() as session:
            slot_count = session.exec(select(func.count()).select_from(StorageSlot)).one()
            return {
                "status": "healthy",
                "backend": "sqlite",
                "counts": {"slots": slot_count},
            }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
