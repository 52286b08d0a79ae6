from pydantic import BaseModel
from typing import Optional
from datetime import datetime, timezone
from enum import Enum


class TimeAction(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    BREAK = "break"
    LUNCH = "lunch"


VALID_ACTIONS = [action.value for action in TimeAction]

# Status assumed for staff with no recorded events
DEFAULT_STATUS = TimeAction.CLOCK_OUT


def to_utc(timestamp: datetime) -> datetime:
    """Naive UTC form of a timestamp. Naive input is taken to be UTC already."""
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


def date_of(timestamp: datetime) -> str:
    """Calendar date (YYYY-MM-DD) a timestamp is filed under."""
    return timestamp.strftime("%Y-%m-%d")


class TimeEntry(BaseModel):
    id: Optional[str] = None
    staffId: str
    action: str  # "clock_in" | "clock_out" | "break" | "lunch"
    timestamp: datetime
    date: str  # YYYY-MM-DD, derived from timestamp at write time

    @classmethod
    def from_document(cls, doc: dict) -> "TimeEntry":
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        if not data.get("date") and data.get("timestamp"):
            data["date"] = date_of(data["timestamp"])
        return cls(**data)

    @property
    def bucket(self) -> str:
        return self.date or date_of(self.timestamp)


class TimeEntryCreate(BaseModel):
    """Manual entry added from the admin dashboard."""
    staffId: str
    action: TimeAction
    date: Optional[str] = None       # YYYY-MM-DD, defaults to the timestamp's date
    timestamp: Optional[datetime] = None  # defaults to now


class TimeEntryUpdate(BaseModel):
    staffId: Optional[str] = None
    action: Optional[TimeAction] = None
    date: Optional[str] = None
    timestamp: Optional[datetime] = None
