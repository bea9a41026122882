import json

import pytest

from booking_store import BookingStore
from errors import PersistenceError
from storage import MemorySlotStorage, SqlAlchemySlotStorage


def make_record(booking_id="SHESH-1700000000000-abc123xyz", **overrides):
    record = {
        "id": booking_id,
        "customer_name": "Ravi Kumar",
        "customer_email": "ravi@example.com",
        "customer_phone": "9876543210",
        "movie_title": "War 2",
        "movie_id": "4",
        "showtime": "9:00PM",
        "ticket_tier": "silver",
        "number_of_tickets": 2,
        "total_amount": 500,
        "booking_date": "2026-10-18T10:00:00+00:00",
        "status": "pending",
        "seats": [],
        "payment_id": None,
        "qr_code": None,
    }
    record.update(overrides)
    return record


@pytest.fixture()
def store():
    with BookingStore(MemorySlotStorage()) as opened:
        yield opened


def test_first_run_is_empty(store):
    assert store.get_all() == []
    assert store.get_by_id("anything") is None


def test_append_then_get_by_id(store):
    record = make_record()
    store.append(record)
    assert store.get_by_id(record["id"]) == record


def test_get_all_keeps_insertion_order_and_is_stable(store):
    for n in range(3):
        store.append(make_record(f"SHESH-{n}"))

    first = store.get_all()
    assert [b["id"] for b in first] == ["SHESH-0", "SHESH-1", "SHESH-2"]
    assert store.get_all() == first


def test_stored_as_single_camel_case_array(store):
    store.append(make_record())
    raw = json.loads(store.storage.get_item("sheshnag_bookings"))
    assert isinstance(raw, list)
    assert raw[0]["customerName"] == "Ravi Kumar"
    assert raw[0]["totalAmount"] == 500


def test_update_status(store):
    store.append(make_record("SHESH-1"))
    store.append(make_record("SHESH-2"))

    assert store.update_status("SHESH-2", "paid") is True
    assert store.get_by_id("SHESH-2")["status"] == "paid"
    assert store.get_by_id("SHESH-1")["status"] == "pending"


def test_update_status_missing_id_leaves_collection(store):
    store.append(make_record())
    before = store.storage.get_item(store.key)

    assert store.update_status("nonexistent", "paid") is False
    assert store.storage.get_item(store.key) == before


def test_list_bookings_by_status(store):
    store.append(make_record("SHESH-1"))
    store.append(make_record("SHESH-2", status="cancelled"))
    assert [b["id"] for b in store.list_bookings("cancelled")] == ["SHESH-2"]
    assert len(store.list_bookings()) == 2


def test_unopened_store_behaves_empty():
    store = BookingStore(MemorySlotStorage())
    store.append(make_record())
    assert store.get_all() == []
    assert store.update_status("SHESH-1700000000000-abc123xyz", "paid") is False


def test_missing_storage_behaves_empty():
    with BookingStore(None) as store:
        store.append(make_record())
        assert store.get_all() == []


def test_database_storage_needs_app_context():
    with BookingStore(SqlAlchemySlotStorage()) as store:
        assert store.get_all() == []


def test_corrupt_slot_reads_as_empty(store):
    store.storage.set_item(store.key, "{not json")
    assert store.get_all() == []


def test_write_failure_propagates(store, monkeypatch):
    def broken(key, value):
        raise PersistenceError("quota exceeded")

    monkeypatch.setattr(store.storage, "set_item", broken)
    with pytest.raises(PersistenceError):
        store.append(make_record())


def test_close_releases_storage():
    storage = MemorySlotStorage()
    store = BookingStore(storage).open()
    store.append(make_record())
    store.close()
    assert not store.is_open
    assert store.get_all() == []
