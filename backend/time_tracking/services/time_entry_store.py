"""
Time entry persistence on top of the ``timeEntries`` collection.

The store only builds and issues queries. Pairing, grouping and any other
interpretation of the entries lives in ``time_tracking.services.aggregation``.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import OperationFailure, PyMongoError

from time_tracking.exceptions import (
    DegradedRead,
    NotFound,
    StoreUnavailable,
    ValidationFailure,
    WriteFailure,
)
from time_tracking.models.time_entry import TimeAction, TimeEntry, date_of, to_utc
from time_tracking.schemas.analytics import DateRange
from time_tracking.utils.logger import log_debug, log_error

TIME_ENTRIES = "timeEntries"

# Server error codes for an ordered query the server refuses to plan or run
# without a suitable index (OperationFailed/sort memory limit,
# NoQueryExecutionPlans, QueryExceededMemoryLimitNoDiskUseAllowed).
DEGRADED_READ_CODES = {96, 291, 292}

SORT_DIRECTIONS = {"asc": 1, "desc": -1}


def parse_action(action: str) -> str:
    try:
        return TimeAction(action).value
    except ValueError:
        raise ValidationFailure("Invalid action")


def parse_object_id(entry_id: str) -> ObjectId:
    try:
        return ObjectId(entry_id)
    except (InvalidId, TypeError):
        raise ValidationFailure(f"Invalid entry id: {entry_id}")


class TimeEntryStore:
    def __init__(self, db, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.clock = clock

    def _collection(self, error_cls=StoreUnavailable):
        if self.db is None:
            raise error_cls("Database connection failed")
        return self.db[TIME_ENTRIES]

    async def record_event(self, staff_id: str, action: str) -> str:
        """Persist one clock action stamped with the current server time and return its id."""
        return await self.add_entry(staff_id, action)

    async def add_entry(
        self,
        staff_id: str,
        action: str,
        date: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        collection = self._collection(WriteFailure)

        timestamp = to_utc(timestamp or self.clock())
        entry_doc = {
            "staffId": staff_id,
            "action": parse_action(action),
            "timestamp": timestamp,
            "date": date or date_of(timestamp),
        }

        try:
            result = await collection.insert_one(entry_doc)
        except PyMongoError as e:
            log_error("Failed to save time entry", e, staff_id=staff_id)
            raise WriteFailure(str(e)) from e

        log_debug("Saved time entry", {"id": str(result.inserted_id), "staffId": staff_id, "action": entry_doc["action"]})
        return str(result.inserted_id)

    async def query_events(
        self,
        staff_id: Optional[str] = None,
        date_range: Optional[DateRange] = None,
        order: Optional[str] = None,
    ) -> List[TimeEntry]:
        """Return matching entries. Order is unspecified unless ``order`` is "asc" or "desc"."""
        collection = self._collection()

        filter_dict: Dict[str, Any] = {}
        if staff_id:
            filter_dict["staffId"] = staff_id
        if date_range:
            filter_dict["date"] = {"$gte": date_range.startDate, "$lte": date_range.endDate}

        try:
            cursor = collection.find(filter_dict)
            if order:
                cursor = cursor.sort("timestamp", SORT_DIRECTIONS[order])
            docs = await cursor.to_list(None)
        except PyMongoError as e:
            log_error("Failed to query time entries", e, staff_id=staff_id)
            raise StoreUnavailable(str(e)) from e

        return [TimeEntry.from_document(doc) for doc in docs]

    async def latest_event(self, staff_id: str) -> Optional[TimeEntry]:
        collection = self._collection()

        try:
            doc = await collection.find_one(
                {"staffId": staff_id},
                sort=[("timestamp", -1)]
            )
        except OperationFailure as e:
            if e.code in DEGRADED_READ_CODES:
                raise DegradedRead(str(e)) from e
            log_error("Failed to read latest time entry", e, staff_id=staff_id)
            raise StoreUnavailable(str(e)) from e
        except PyMongoError as e:
            log_error("Failed to read latest time entry", e, staff_id=staff_id)
            raise StoreUnavailable(str(e)) from e

        return TimeEntry.from_document(doc) if doc else None

    async def update_entry(self, entry_id: str, changes: Dict[str, Any]) -> None:
        """Overwrite fields of an existing entry. A new timestamp without a date re-files the entry."""
        object_id = parse_object_id(entry_id)
        updates = {key: value for key, value in changes.items() if value is not None}
        if not updates:
            raise ValidationFailure("No fields to update")
        if "action" in updates:
            updates["action"] = parse_action(updates["action"])
        if "timestamp" in updates:
            updates["timestamp"] = to_utc(updates["timestamp"])
        if "timestamp" in updates and "date" not in updates:
            updates["date"] = date_of(updates["timestamp"])

        collection = self._collection(WriteFailure)
        try:
            result = await collection.update_one({"_id": object_id}, {"$set": updates})
        except PyMongoError as e:
            log_error(f"Failed to update time entry {entry_id}", e)
            raise WriteFailure(str(e)) from e

        if result.matched_count == 0:
            raise NotFound(f"Time entry {entry_id} not found")

    async def delete_entry(self, entry_id: str) -> None:
        object_id = parse_object_id(entry_id)
        collection = self._collection(WriteFailure)
        try:
            result = await collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            log_error(f"Failed to delete time entry {entry_id}", e)
            raise WriteFailure(str(e)) from e

        if result.deleted_count == 0:
            raise NotFound(f"Time entry {entry_id} not found")

    async def ping(self) -> None:
        if self.db is None:
            raise StoreUnavailable("Database connection failed")
        try:
            await self.db.command("ping")
        except PyMongoError as e:
            raise StoreUnavailable(str(e)) from e
