"""
Database module - models, durable slot and persistence.

Uses SQLModel with SQLite for the key-value slot the record store writes to.
"""

from app.db import models, slot, sqlite

__all__ = ["models", "slot", "sqlite"]
