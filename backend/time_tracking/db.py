import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from time_tracking.config import settings
from time_tracking.services.staff_directory import StaffDirectory
from time_tracking.services.time_entry_store import TimeEntryStore

logger = logging.getLogger(__name__)


def connect(uri: Optional[str] = None, db_name: Optional[str] = None) -> Optional[AsyncIOMotorDatabase]:
    """Create a Motor client and return its database, or None when no URI is configured."""
    uri = uri or settings.MONGODB_URI
    if not uri:
        logger.error("MONGODB_URI not found, time tracking store is not configured")
        return None

    client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS)
    # Prefer the database named in the URI, fall back to MONGODB_DB
    default_db = client.get_default_database(default=db_name or settings.MONGODB_DB)
    logger.info("MongoDB client ready for database '%s'", default_db.name)
    return default_db


def init_db(app, uri: Optional[str] = None, db_name: Optional[str] = None):
    db = connect(uri, db_name)
    app.state.db = db
    app.state.store = TimeEntryStore(db)
    app.state.staff = StaffDirectory(db)


def close_db(app):
    db = getattr(app.state, "db", None)
    if db is not None:
        db.client.close()
        logger.info("MongoDB client closed")


def get_db(request: Request) -> Optional[AsyncIOMotorDatabase]:
    return request.app.state.db


def get_store(request: Request) -> TimeEntryStore:
    return request.app.state.store


def get_staff_directory(request: Request) -> StaffDirectory:
    return request.app.state.staff
