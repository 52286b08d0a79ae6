#!/usr/bin/env python3
"""
Initialize MongoDB collections for time tracking: indexes on timeEntries and the default staff roster
"""
import asyncio

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from time_tracking.db import connect
from time_tracking.models.staff import DEFAULT_STAFF
from time_tracking.services.staff_directory import STAFF
from time_tracking.services.time_entry_store import TIME_ENTRIES

TIME_ENTRY_INDEXES = [
    # Serves the status lookup: newest entry of one staff member
    ([("staffId", ASCENDING), ("timestamp", DESCENDING)], "staffId_timestamp_index"),
    ([("date", ASCENDING)], "date_index"),
]


async def create_time_entry_indexes(db) -> list:
    created = []
    for keys, name in TIME_ENTRY_INDEXES:
        try:
            await db[TIME_ENTRIES].create_index(keys, name=name)
            print(f"✅ Created index {name} on {TIME_ENTRIES}")
            created.append(name)
        except PyMongoError as e:
            print(f"❌ Error creating index {name}: {e}")
    return created


async def seed_default_staff(db) -> int:
    """Insert the default staff members that are not stored yet"""
    inserted = 0
    for member in DEFAULT_STAFF:
        result = await db[STAFF].update_one(
            {"_id": member.id},
            {"$setOnInsert": {"_id": member.id, **member.model_dump()}},
            upsert=True
        )
        if result.upserted_id is not None:
            print(f"✅ Added staff member {member.id}")
            inserted += 1
        else:
            print(f"ℹ️  Staff member {member.id} already exists")
    return inserted


async def init_collections(db=None):
    db = db if db is not None else connect()
    if db is None:
        print("❌ MONGODB_URI is not set, nothing to initialize")
        return False

    print("🔧 Initializing MongoDB collections for time tracking...")
    await create_time_entry_indexes(db)
    await seed_default_staff(db)
    print("🎉 Initialization complete")
    return True


if __name__ == "__main__":
    asyncio.run(init_collections())
