"""Slot storage backends for the booking store.

A backend keeps string values under named slots, the way browser local
storage does. ``is_available()`` is the capability check the store runs
before every read or write.
"""
from flask import has_app_context
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError
from models import StorageSlot, db


class MemorySlotStorage:
    def __init__(self):
        self._items = {}

    def is_available(self) -> bool:
        return True

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def close(self) -> None:
        self._items = {}


class SqlAlchemySlotStorage:
    """Slots kept in the ``storage_slots`` table. Needs an application context."""

    def __init__(self, database=db):
        self.db = database

    def is_available(self) -> bool:
        return has_app_context()

    def get_item(self, key):
        slot = self.db.session.get(StorageSlot, key)
        return slot.value if slot else None

    def set_item(self, key: str, value: str) -> None:
        try:
            slot = self.db.session.get(StorageSlot, key)
            if slot is None:
                self.db.session.add(StorageSlot(key=key, value=value))
            else:
                slot.value = value
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error(f"Failed to write storage slot {key}: {exc}")
            raise PersistenceError(str(exc)) from exc

    def close(self) -> None:
        if has_app_context():
            self.db.session.remove()


def build_storage(backend):
    if backend == "memory":
        return MemorySlotStorage()
    return SqlAlchemySlotStorage()
