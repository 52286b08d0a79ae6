import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from time_tracking.exceptions import StoreUnavailable, ValidationFailure
from time_tracking.services.staff_directory import StaffDirectory, normalize_staff_id


def make_db(docs=None):
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs or [])
    collection.find.return_value = cursor
    collection.insert_one = AsyncMock()
    db = MagicMock()
    db.__getitem__.return_value = collection
    return db, collection


def test_normalize_staff_id():
    assert normalize_staff_id("  John   Doe ") == "john_doe"


def test_add_staff():
    db, collection = make_db()

    member = asyncio.run(StaffDirectory(db).add_staff("Maria Lopez", "Maria Lopez", "Cashier"))

    assert member.id == "maria_lopez"
    assert member.active is True
    inserted = collection.insert_one.await_args.args[0]
    assert inserted["_id"] == "maria_lopez"
    assert inserted["role"] == "Cashier"


def test_add_duplicate_staff():
    db, collection = make_db()
    collection.insert_one.side_effect = DuplicateKeyError("dup")

    with pytest.raises(ValidationFailure):
        asyncio.run(StaffDirectory(db).add_staff("john_doe", "John Doe", "Floor Manager"))


def test_list_staff_defaults_when_empty():
    db, _ = make_db()

    staff = asyncio.run(StaffDirectory(db).list_staff())

    assert [member.id for member in staff] == ["john_doe", "jane_smith"]


def test_list_staff_from_documents():
    db, _ = make_db([{"_id": "amy", "name": "Amy", "role": "Cashier", "active": False}])

    staff = asyncio.run(StaffDirectory(db).list_staff())

    assert staff[0].id == "amy"
    assert staff[0].active is False


def test_list_staff_without_database():
    with pytest.raises(StoreUnavailable):
        asyncio.run(StaffDirectory(None).list_staff())
