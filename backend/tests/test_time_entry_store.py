import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from time_tracking.exceptions import (
    DegradedRead,
    NotFound,
    StoreUnavailable,
    ValidationFailure,
    WriteFailure,
)
from time_tracking.schemas.analytics import DateRange
from time_tracking.services.time_entry_store import TimeEntryStore

NOW = datetime(2026, 3, 2, 9, 30)


def make_db(collection):
    db = MagicMock()
    db.__getitem__.return_value = collection
    return db


def make_collection(docs=None):
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs or [])
    collection.find.return_value = cursor
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId("65f000000000000000000001")))
    collection.find_one = AsyncMock(return_value=None)
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    return collection


def test_record_event_builds_document():
    collection = make_collection()
    store = TimeEntryStore(make_db(collection), clock=lambda: NOW)

    entry_id = asyncio.run(store.record_event("john_doe", "clock_in"))

    assert entry_id == "65f000000000000000000001"
    collection.insert_one.assert_awaited_once_with({
        "staffId": "john_doe",
        "action": "clock_in",
        "timestamp": NOW,
        "date": "2026-03-02",
    })


def test_add_entry_offset_timestamp_uses_utc_date():
    collection = make_collection()
    store = TimeEntryStore(make_db(collection))
    late_shift = datetime(2026, 3, 2, 23, 30, tzinfo=timezone(timedelta(hours=-5)))

    asyncio.run(store.add_entry("john_doe", "clock_out", timestamp=late_shift))

    collection.insert_one.assert_awaited_once_with({
        "staffId": "john_doe",
        "action": "clock_out",
        "timestamp": datetime(2026, 3, 3, 4, 30),
        "date": "2026-03-03",
    })


def test_record_event_without_database():
    store = TimeEntryStore(None)

    with pytest.raises(WriteFailure):
        asyncio.run(store.record_event("john_doe", "clock_in"))


def test_record_event_driver_failure():
    collection = make_collection()
    collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")
    store = TimeEntryStore(make_db(collection))

    with pytest.raises(WriteFailure):
        asyncio.run(store.record_event("john_doe", "clock_in"))


def test_record_event_rejects_unknown_action():
    store = TimeEntryStore(make_db(make_collection()))

    with pytest.raises(ValidationFailure):
        asyncio.run(store.record_event("john_doe", "nap"))


def test_query_events_filters():
    docs = [{
        "_id": ObjectId("65f000000000000000000002"),
        "staffId": "john_doe",
        "action": "lunch",
        "timestamp": NOW,
        "date": "2026-03-02",
    }]
    collection = make_collection(docs)
    store = TimeEntryStore(make_db(collection))

    entries = asyncio.run(store.query_events(
        staff_id="john_doe",
        date_range=DateRange(startDate="2026-03-01", endDate="2026-03-07"),
    ))

    collection.find.assert_called_once_with({
        "staffId": "john_doe",
        "date": {"$gte": "2026-03-01", "$lte": "2026-03-07"},
    })
    collection.find.return_value.sort.assert_not_called()
    assert entries[0].id == "65f000000000000000000002"
    assert entries[0].action == "lunch"


def test_query_events_ordered():
    collection = make_collection()
    store = TimeEntryStore(make_db(collection))

    asyncio.run(store.query_events(order="desc"))

    collection.find.assert_called_once_with({})
    collection.find.return_value.sort.assert_called_once_with("timestamp", -1)


def test_query_events_fills_missing_date():
    collection = make_collection([{"_id": ObjectId(), "staffId": "a", "action": "break", "timestamp": NOW}])
    store = TimeEntryStore(make_db(collection))

    entries = asyncio.run(store.query_events())

    assert entries[0].date == "2026-03-02"


def test_latest_event_query():
    collection = make_collection()
    collection.find_one.return_value = {
        "_id": ObjectId(), "staffId": "john_doe", "action": "break", "timestamp": NOW, "date": "2026-03-02"
    }
    store = TimeEntryStore(make_db(collection))

    entry = asyncio.run(store.latest_event("john_doe"))

    collection.find_one.assert_awaited_once_with({"staffId": "john_doe"}, sort=[("timestamp", -1)])
    assert entry.action == "break"


def test_latest_event_index_not_ready():
    collection = make_collection()
    collection.find_one.side_effect = OperationFailure("No query solutions", code=291)
    store = TimeEntryStore(make_db(collection))

    with pytest.raises(DegradedRead):
        asyncio.run(store.latest_event("john_doe"))


def test_latest_event_other_failure():
    collection = make_collection()
    collection.find_one.side_effect = OperationFailure("not authorized", code=13)
    store = TimeEntryStore(make_db(collection))

    with pytest.raises(StoreUnavailable):
        asyncio.run(store.latest_event("john_doe"))


def test_update_entry_refiles_date():
    collection = make_collection()
    store = TimeEntryStore(make_db(collection))
    entry_id = "65f000000000000000000003"

    asyncio.run(store.update_entry(entry_id, {"timestamp": datetime(2026, 3, 4, 8, 0), "staffId": None}))

    collection.update_one.assert_awaited_once_with(
        {"_id": ObjectId(entry_id)},
        {"$set": {"timestamp": datetime(2026, 3, 4, 8, 0), "date": "2026-03-04"}},
    )


def test_update_entry_offset_timestamp_uses_utc_date():
    collection = make_collection()
    store = TimeEntryStore(make_db(collection))
    entry_id = "65f000000000000000000003"
    local = datetime(2026, 3, 4, 22, 0, tzinfo=timezone(timedelta(hours=-5)))

    asyncio.run(store.update_entry(entry_id, {"timestamp": local}))

    collection.update_one.assert_awaited_once_with(
        {"_id": ObjectId(entry_id)},
        {"$set": {"timestamp": datetime(2026, 3, 5, 3, 0), "date": "2026-03-05"}},
    )


def test_update_entry_missing():
    collection = make_collection()
    collection.update_one.return_value = MagicMock(matched_count=0)
    store = TimeEntryStore(make_db(collection))

    with pytest.raises(NotFound):
        asyncio.run(store.update_entry("65f000000000000000000003", {"action": "lunch"}))


def test_update_entry_requires_changes():
    store = TimeEntryStore(make_db(make_collection()))

    with pytest.raises(ValidationFailure):
        asyncio.run(store.update_entry("65f000000000000000000003", {}))


def test_delete_entry_invalid_id():
    store = TimeEntryStore(make_db(make_collection()))

    with pytest.raises(ValidationFailure):
        asyncio.run(store.delete_entry("not-an-id"))


def test_delete_entry_missing():
    collection = make_collection()
    collection.delete_one.return_value = MagicMock(deleted_count=0)
    store = TimeEntryStore(make_db(collection))

    with pytest.raises(NotFound):
        asyncio.run(store.delete_entry("65f000000000000000000003"))
