from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from time_tracking.models.time_entry import TimeEntry, VALID_ACTIONS


class DateRange(BaseModel):
    startDate: str  # YYYY-MM-DD, inclusive
    endDate: str    # YYYY-MM-DD, inclusive

    def contains(self, date: str) -> bool:
        return self.startDate <= date <= self.endDate


class DailySummary(BaseModel):
    clockIn: Optional[datetime] = None
    clockOut: Optional[datetime] = None
    hours: float = 0.0
    breaks: int = 0
    lunch: int = 0


class StaffHours(BaseModel):
    hours: float = 0.0
    entries: int = 0
    displayHours: str = "0h 0m"


def _empty_action_counts() -> Dict[str, int]:
    return {action: 0 for action in VALID_ACTIONS}


class Analytics(BaseModel):
    period: Optional[DateRange] = None
    totalEntries: int = 0
    uniqueStaff: int = 0
    totalHours: float = 0.0
    averageHoursPerStaff: float = 0.0
    byStaff: Dict[str, StaffHours] = Field(default_factory=dict)
    byAction: Dict[str, int] = Field(default_factory=_empty_action_counts)
    byDay: Dict[str, int] = Field(default_factory=dict)


class StaffReport(BaseModel):
    staffId: str
    period: Optional[DateRange] = None
    totalHours: float = 0.0
    averageHours: float = 0.0
    breaksTaken: int = 0
    lunchBreaks: int = 0
    dailyBreakdown: Dict[str, DailySummary] = Field(default_factory=dict)
    entries: List[TimeEntry] = Field(default_factory=list)
