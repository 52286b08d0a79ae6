# tests/conftest.py
import os
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

# Tests never talk to a real MongoDB or Redis
os.environ.pop("MONGODB_URI", None)
os.environ.pop("REDIS_URL", None)

from time_tracking.exceptions import NotFound, StoreUnavailable, ValidationFailure, WriteFailure  # noqa: E402
from time_tracking.main import create_app  # noqa: E402
from time_tracking.models.staff import DEFAULT_STAFF, StaffMember  # noqa: E402
from time_tracking.models.time_entry import TimeEntry, date_of, to_utc  # noqa: E402
from time_tracking.services.staff_directory import normalize_staff_id  # noqa: E402
from time_tracking.services.time_entry_store import parse_action, parse_object_id  # noqa: E402


def make_entry(staff_id, action, timestamp, date=None, entry_id=None):
    return TimeEntry(
        id=entry_id or str(ObjectId()),
        staffId=staff_id,
        action=action,
        timestamp=timestamp,
        date=date or date_of(timestamp),
    )


class FakeTimeEntryStore:
    """In-memory stand-in for TimeEntryStore with the same async interface"""

    def __init__(self, entries=None, now=datetime(2026, 3, 2, 9, 0)):
        self.entries = list(entries or [])
        self.now = now
        self.fail_with = None
        self.latest_error = None

    def _check(self):
        if self.fail_with:
            raise self.fail_with

    async def record_event(self, staff_id, action):
        return await self.add_entry(staff_id, action)

    async def add_entry(self, staff_id, action, date=None, timestamp=None):
        if isinstance(self.fail_with, StoreUnavailable):
            raise WriteFailure(str(self.fail_with))
        entry = make_entry(staff_id, parse_action(action), to_utc(timestamp or self.now), date)
        self.entries.append(entry)
        return entry.id

    async def query_events(self, staff_id=None, date_range=None, order=None):
        self._check()
        result = [e for e in self.entries if staff_id is None or e.staffId == staff_id]
        if date_range:
            result = [e for e in result if date_range.startDate <= e.date <= date_range.endDate]
        if order:
            result.sort(key=lambda e: e.timestamp, reverse=order == "desc")
        return result

    async def latest_event(self, staff_id):
        self._check()
        if self.latest_error:
            raise self.latest_error
        staff_entries = [e for e in self.entries if e.staffId == staff_id]
        if not staff_entries:
            return None
        return max(staff_entries, key=lambda e: e.timestamp)

    def _find(self, entry_id):
        parse_object_id(entry_id)
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise NotFound(f"Time entry {entry_id} not found")

    async def update_entry(self, entry_id, changes):
        self._check()
        entry = self._find(entry_id)
        if not changes:
            raise ValidationFailure("No fields to update")
        if "timestamp" in changes:
            changes = dict(changes, timestamp=to_utc(changes["timestamp"]))
        for key, value in changes.items():
            setattr(entry, key, getattr(value, "value", value))
        if "timestamp" in changes and "date" not in changes:
            entry.date = date_of(changes["timestamp"])

    async def delete_entry(self, entry_id):
        self._check()
        self.entries.remove(self._find(entry_id))

    async def ping(self):
        self._check()


class FakeStaffDirectory:
    def __init__(self):
        self.members = {}

    async def add_staff(self, staff_id, name, role):
        member = StaffMember(id=normalize_staff_id(staff_id), name=name, role=role)
        if member.id in self.members:
            raise ValidationFailure(f"Staff member '{member.id}' already exists")
        self.members[member.id] = member
        return member

    async def list_staff(self):
        return list(self.members.values()) or list(DEFAULT_STAFF)


@pytest.fixture
def store():
    return FakeTimeEntryStore()


@pytest.fixture
def staff_directory():
    return FakeStaffDirectory()


@pytest.fixture
def app(store, staff_directory):
    app = create_app(connect_db=False)
    app.state.db = None
    app.state.store = store
    app.state.staff = staff_directory
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
