from fastapi import APIRouter, Depends, Query
from typing import Optional
from datetime import datetime

from time_tracking.db import get_db, get_store
from time_tracking.exceptions import ValidationFailure
from time_tracking.models.time_entry import TimeAction, TimeEntryCreate, TimeEntryUpdate
from time_tracking.schemas.analytics import DateRange
from time_tracking.schemas.time_tracking import EntryFilters
from time_tracking.services.aggregation import build_staff_report, compute_analytics, format_hours
from time_tracking.services.entry_filters import filter_entries
from time_tracking.services.export import entries_to_csv, staff_report_to_csv
from time_tracking.services.time_entry_store import TimeEntryStore
from time_tracking.utils.cors import cors_json, preflight
from time_tracking.utils.logger import EventTypes, log_event

router = APIRouter()

ROUTE_METHODS = {
    "/entries": ["GET", "POST", "OPTIONS"],
    "/entries/{entry_id}": ["PATCH", "DELETE", "OPTIONS"],
    "/analytics": ["GET", "OPTIONS"],
    "/reports/{staff_id}": ["GET", "OPTIONS"],
    "/export/entries": ["GET", "OPTIONS"],
    "/export/reports/{staff_id}": ["GET", "OPTIONS"],
}


def _check_date(value: str, field: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationFailure(f"Invalid {field}, expected YYYY-MM-DD")
    return value


def _check_time(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return None
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        raise ValidationFailure(f"Invalid {field}, expected HH:MM")
    return value


def date_range_params(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None
) -> DateRange:
    """Requested date range, defaulting to today (UTC) on either side."""
    today = datetime.utcnow().strftime("%Y-%m-%d")
    start_date = _check_date(startDate, "startDate") if startDate else today
    end_date = _check_date(endDate, "endDate") if endDate else today

    if start_date > end_date:
        raise ValidationFailure("startDate must not be after endDate")

    return DateRange(startDate=start_date, endDate=end_date)


def entry_filter_params(
    staffId: Optional[str] = None,
    action: Optional[TimeAction] = None,
    dateFrom: Optional[str] = None,
    dateTo: Optional[str] = None,
    timeFrom: Optional[str] = None,
    timeTo: Optional[str] = None
) -> EntryFilters:
    return EntryFilters(
        staffId=staffId,
        action=action,
        dateFrom=_check_date(dateFrom, "dateFrom") if dateFrom else None,
        dateTo=_check_date(dateTo, "dateTo") if dateTo else None,
        timeFrom=_check_time(timeFrom, "timeFrom"),
        timeTo=_check_time(timeTo, "timeTo"),
    )


async def _filtered_entries(store: TimeEntryStore, date_range: DateRange, filters: EntryFilters):
    entries = await store.query_events(date_range=date_range, order="desc")
    return entries, filter_entries(entries, filters)


@router.get("/entries")
async def list_entries(
    limit: Optional[int] = Query(None, ge=1),
    date_range: DateRange = Depends(date_range_params),
    filters: EntryFilters = Depends(entry_filter_params),
    store: TimeEntryStore = Depends(get_store)
):
    """Entries in the date range, newest first, narrowed by the dashboard filters"""
    entries, filtered = await _filtered_entries(store, date_range, filters)
    if limit:
        filtered = filtered[:limit]

    return cors_json({
        "success": True,
        "period": date_range,
        "total": len(entries),
        "count": len(filtered),
        "entries": filtered
    }, ROUTE_METHODS["/entries"])


@router.post("/entries", status_code=201)
async def create_entry(
    entry: TimeEntryCreate,
    store: TimeEntryStore = Depends(get_store),
    db=Depends(get_db)
):
    """Manual entry from the admin dashboard"""
    if entry.date:
        _check_date(entry.date, "date")

    entry_id = await store.add_entry(entry.staffId, entry.action.value, entry.date, entry.timestamp)
    await log_event(db, EventTypes.ENTRY_CREATED, {"id": entry_id, "action": entry.action.value}, staff_id=entry.staffId)

    return cors_json({"success": True, "id": entry_id}, ROUTE_METHODS["/entries"], status_code=201)


@router.patch("/entries/{entry_id}")
async def update_entry(
    entry_id: str,
    changes: TimeEntryUpdate,
    store: TimeEntryStore = Depends(get_store),
    db=Depends(get_db)
):
    if changes.date:
        _check_date(changes.date, "date")

    updates = changes.model_dump(exclude_none=True)
    await store.update_entry(entry_id, updates)
    await log_event(db, EventTypes.ENTRY_UPDATED, {"id": entry_id, "fields": sorted(updates)}, staff_id=changes.staffId)

    return cors_json({"success": True, "id": entry_id}, ROUTE_METHODS["/entries/{entry_id}"])


@router.delete("/entries/{entry_id}")
async def delete_entry(
    entry_id: str,
    store: TimeEntryStore = Depends(get_store),
    db=Depends(get_db)
):
    await store.delete_entry(entry_id)
    await log_event(db, EventTypes.ENTRY_DELETED, {"id": entry_id})

    return cors_json({"success": True, "id": entry_id}, ROUTE_METHODS["/entries/{entry_id}"])


@router.get("/analytics")
async def get_analytics(
    date_range: DateRange = Depends(date_range_params),
    store: TimeEntryStore = Depends(get_store)
):
    events = await store.query_events(date_range=date_range)
    analytics = compute_analytics(events, date_range)

    return cors_json({
        "success": True,
        "analytics": analytics,
        "displayTotalHours": format_hours(analytics.totalHours)
    }, ROUTE_METHODS["/analytics"])


@router.get("/reports/{staff_id}")
async def get_staff_report(
    staff_id: str,
    date_range: DateRange = Depends(date_range_params),
    store: TimeEntryStore = Depends(get_store)
):
    events = await store.query_events(staff_id=staff_id, date_range=date_range)
    report = build_staff_report(events, staff_id, date_range)

    return cors_json({
        "success": True,
        "report": report,
        "displayTotalHours": format_hours(report.totalHours)
    }, ROUTE_METHODS["/reports/{staff_id}"])


@router.get("/export/entries")
async def export_entries(
    date_range: DateRange = Depends(date_range_params),
    filters: EntryFilters = Depends(entry_filter_params),
    store: TimeEntryStore = Depends(get_store),
    db=Depends(get_db)
):
    """CSV of the filtered entries, or of every entry in range when no filter is set"""
    entries, filtered = await _filtered_entries(store, date_range, filters)
    rows = entries if filters.is_empty() else filtered

    await log_event(db, EventTypes.REPORT_EXPORTED, {"report": "entries", "record_count": len(rows)})

    return cors_json({
        "success": True,
        "format": "csv",
        "content": entries_to_csv(rows),
        "filename": "time-entries.csv",
        "record_count": len(rows)
    }, ROUTE_METHODS["/export/entries"])


@router.get("/export/reports/{staff_id}")
async def export_staff_report(
    staff_id: str,
    date_range: DateRange = Depends(date_range_params),
    store: TimeEntryStore = Depends(get_store),
    db=Depends(get_db)
):
    events = await store.query_events(staff_id=staff_id, date_range=date_range)
    report = build_staff_report(events, staff_id, date_range)

    await log_event(db, EventTypes.REPORT_EXPORTED, {"report": "staff", "record_count": len(report.entries)}, staff_id=staff_id)

    return cors_json({
        "success": True,
        "format": "csv",
        "content": staff_report_to_csv(report),
        "filename": f"staff-report-{staff_id}.csv",
        "record_count": len(report.entries)
    }, ROUTE_METHODS["/export/reports/{staff_id}"])


def _preflight_handler(methods):
    async def handler():
        return preflight(methods)
    return handler


for _path, _methods in ROUTE_METHODS.items():
    router.add_api_route(_path, _preflight_handler(_methods), methods=["OPTIONS"], include_in_schema=False)
