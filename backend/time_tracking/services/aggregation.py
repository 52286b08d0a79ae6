"""
Clock event aggregation.

Pairs clock_in/clock_out events into worked hours per staff member per day
and derives the dashboard analytics and staff reports from them. Everything
here is computed on read from the entries passed in; nothing is persisted.
"""
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from time_tracking.models.time_entry import TimeAction, TimeEntry
from time_tracking.schemas.analytics import (
    Analytics,
    DailySummary,
    DateRange,
    StaffHours,
    StaffReport,
)


def _hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def group_by_staff(events: Iterable[TimeEntry]) -> Dict[str, List[TimeEntry]]:
    """Group events by staff id, each group in timestamp order.

    ``sorted`` is stable, so events sharing a timestamp keep their input order.
    """
    groups: Dict[str, List[TimeEntry]] = defaultdict(list)
    for event in events:
        groups[event.staffId].append(event)

    return {
        staff_id: sorted(staff_events, key=lambda e: e.timestamp)
        for staff_id, staff_events in groups.items()
    }


def summarize_staff_events(events: List[TimeEntry]) -> Dict[str, DailySummary]:
    """
    Build the per-day summaries of one staff member.

    Args:
        events: the staff member's events, already in timestamp order

    Returns:
        Mapping of date (YYYY-MM-DD) to DailySummary
    """
    daily: Dict[str, DailySummary] = {}
    open_clock_in: Optional[datetime] = None
    open_date: Optional[str] = None

    for event in events:
        date = event.bucket
        summary = daily.setdefault(date, DailySummary())

        if event.action == TimeAction.CLOCK_IN:
            # A previous unmatched clock-in is dropped
            open_clock_in = event.timestamp
            open_date = date
            summary.clockIn = event.timestamp
        elif event.action == TimeAction.CLOCK_OUT:
            if open_clock_in is None:
                continue
            # Whole interval goes to the clock-in's day. Negative intervals are kept as-is.
            session_day = daily[open_date]
            session_day.hours += _hours_between(open_clock_in, event.timestamp)
            session_day.clockOut = event.timestamp
            open_clock_in = None
            open_date = None
        elif event.action == TimeAction.BREAK:
            summary.breaks += 1
        elif event.action == TimeAction.LUNCH:
            summary.lunch += 1

    return daily


def compute_daily_summaries(events: Iterable[TimeEntry]) -> Dict[str, Dict[str, DailySummary]]:
    """
    Per-staff, per-day summaries of worked hours, breaks and lunches.

    Range filtering is the caller's job: every event passed in is counted.
    """
    return {
        staff_id: summarize_staff_events(staff_events)
        for staff_id, staff_events in group_by_staff(events).items()
    }


def total_hours(daily: Dict[str, DailySummary]) -> float:
    return sum(summary.hours for summary in daily.values())


def format_hours(decimal_hours: float) -> str:
    """Render fractional hours for display, e.g. 8.5 -> '8h 30m'."""
    if decimal_hours < 0:
        return "-" + format_hours(-decimal_hours)

    hours = int(decimal_hours // 1)
    minutes = round((decimal_hours - hours) * 60)
    if minutes == 60:
        hours += 1
        minutes = 0

    if hours == 0 and minutes == 0:
        return "0h 0m"
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def _in_range(events: Iterable[TimeEntry], date_range: Optional[DateRange]) -> List[TimeEntry]:
    if date_range is None:
        return list(events)
    return [event for event in events if date_range.contains(event.bucket)]


def compute_analytics(events: Iterable[TimeEntry], date_range: Optional[DateRange] = None) -> Analytics:
    """Dashboard analytics over the events whose stored date falls inside ``date_range``."""
    entries = _in_range(events, date_range)
    analytics = Analytics(period=date_range)
    analytics.totalEntries = len(entries)

    for entry in entries:
        # Unknown actions still count as entries but not per action
        if entry.action in analytics.byAction:
            analytics.byAction[entry.action] += 1
        analytics.byDay[entry.date] = analytics.byDay.get(entry.date, 0) + 1

    for staff_id, staff_events in group_by_staff(entries).items():
        hours = total_hours(summarize_staff_events(staff_events))
        analytics.byStaff[staff_id] = StaffHours(
            hours=hours,
            entries=len(staff_events),
            displayHours=format_hours(hours),
        )
        analytics.totalHours += hours

    analytics.uniqueStaff = len(analytics.byStaff)
    if analytics.uniqueStaff:
        analytics.averageHoursPerStaff = analytics.totalHours / analytics.uniqueStaff

    return analytics


def build_staff_report(
    events: Iterable[TimeEntry],
    staff_id: str,
    date_range: Optional[DateRange] = None
) -> StaffReport:
    """Hours, breaks and the daily breakdown of a single staff member."""
    staff_events = sorted(
        (event for event in _in_range(events, date_range) if event.staffId == staff_id),
        key=lambda e: e.timestamp,
    )
    daily = summarize_staff_events(staff_events)
    worked = total_hours(daily)

    return StaffReport(
        staffId=staff_id,
        period=date_range,
        totalHours=round(worked, 2),
        averageHours=round(worked / len(daily), 2) if daily else 0.0,
        breaksTaken=sum(summary.breaks for summary in daily.values()),
        lunchBreaks=sum(summary.lunch for summary in daily.values()),
        dailyBreakdown=dict(sorted(daily.items())),
        entries=staff_events,
    )
