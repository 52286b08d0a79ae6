from typing import Iterable, List

from time_tracking.models.time_entry import TimeEntry
from time_tracking.schemas.time_tracking import EntryFilters


def filter_entries(entries: Iterable[TimeEntry], filters: EntryFilters) -> List[TimeEntry]:
    """Apply the dashboard's entry filters. Every bound is inclusive; unset filters match everything."""
    filtered = list(entries)

    if filters.staffId:
        filtered = [e for e in filtered if e.staffId == filters.staffId]

    if filters.action:
        filtered = [e for e in filtered if e.action == filters.action]

    if filters.dateFrom:
        filtered = [e for e in filtered if e.date >= filters.dateFrom]
    if filters.dateTo:
        filtered = [e for e in filtered if e.date <= filters.dateTo]

    # Time of day, compared as HH:MM strings
    if filters.timeFrom or filters.timeTo:
        def in_window(entry: TimeEntry) -> bool:
            entry_time = entry.timestamp.strftime("%H:%M")
            if filters.timeFrom and entry_time < filters.timeFrom:
                return False
            if filters.timeTo and entry_time > filters.timeTo:
                return False
            return True

        filtered = [e for e in filtered if in_window(e)]

    return filtered
