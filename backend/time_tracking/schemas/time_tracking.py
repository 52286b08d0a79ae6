from pydantic import BaseModel, Field
from typing import Optional
from time_tracking.models.time_entry import TimeAction


class ClockRequest(BaseModel):
    staffId: str = Field(..., min_length=1)
    action: TimeAction


class ClockResponse(BaseModel):
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None


class StatusResponse(BaseModel):
    success: bool
    action: Optional[str] = None
    error: Optional[str] = None


class EntryFilters(BaseModel):
    staffId: Optional[str] = None
    action: Optional[TimeAction] = None
    dateFrom: Optional[str] = None  # YYYY-MM-DD, inclusive
    dateTo: Optional[str] = None    # YYYY-MM-DD, inclusive
    timeFrom: Optional[str] = None  # HH:MM, inclusive
    timeTo: Optional[str] = None    # HH:MM, inclusive

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())
