import json

from loguru import logger
from marshmallow import ValidationError

from errors import PersistenceError
from schemas import booking_record_schema

DEFAULT_STORAGE_KEY = "sheshnag_bookings"


class BookingStore:
    """Ordered collection of booking records kept as one JSON array in a slot.

    Every write serializes the whole collection again, so two writers racing
    on the same slot end with the last one's copy. Reads and writes against an
    unavailable backend (or a store that is not open) behave as an empty,
    read-only collection.
    """

    def __init__(self, storage, key=DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.is_open = False

    def open(self):
        self.is_open = True
        return self

    def close(self):
        if self.is_open and self.storage is not None:
            self.storage.close()
        self.is_open = False

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _usable(self) -> bool:
        return self.is_open and self.storage is not None and self.storage.is_available()

    def _read(self):
        if not self._usable():
            return []

        stored = self.storage.get_item(self.key)
        if not stored:
            return []

        try:
            return booking_record_schema.load(json.loads(stored), many=True)
        except (ValueError, ValidationError) as exc:
            logger.error(f"Ignoring unreadable bookings in slot {self.key}: {exc}")
            return []

    def _write(self, bookings):
        if not self._usable():
            logger.warning(f"Booking storage unavailable, skipping write to {self.key}")
            return

        try:
            payload = json.dumps(booking_record_schema.dump(bookings, many=True))
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Could not serialize bookings: {exc}") from exc
        self.storage.set_item(self.key, payload)

    def get_all(self):
        return self._read()

    def append(self, record):
        bookings = self._read()
        bookings.append(record)
        self._write(bookings)

    def get_by_id(self, booking_id):
        for booking in self._read():
            if booking["id"] == booking_id:
                return booking
        return None

    def update_status(self, booking_id, status) -> bool:
        bookings = self._read()
        for booking in bookings:
            if booking["id"] == booking_id:
                booking["status"] = status
                self._write(bookings)
                return True
        return False

    def list_bookings(self, status=None):
        bookings = self._read()
        if status is None:
            return bookings
        return [booking for booking in bookings if booking["status"] == status]
