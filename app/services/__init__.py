"""
Services module - record store, controllers and their helpers.
"""

from app.services import form, ids, notify, store, table, validation

__all__ = ["form", "ids", "notify", "store", "table", "validation"]
