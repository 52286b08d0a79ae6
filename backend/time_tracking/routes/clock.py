from fastapi import APIRouter, Depends

from time_tracking.db import get_store
from time_tracking.models.time_entry import VALID_ACTIONS
from time_tracking.schemas.time_tracking import ClockRequest, ClockResponse, StatusResponse
from time_tracking.services.status_resolver import resolve_status
from time_tracking.services.time_entry_store import TimeEntryStore
from time_tracking.utils.cors import cors_json, preflight
from time_tracking.utils.logger import logger

router = APIRouter()

CLOCK_METHODS = ["POST", "GET", "OPTIONS"]
STATUS_METHODS = ["GET", "OPTIONS"]
INFO_METHODS = ["GET", "POST", "OPTIONS"]


@router.get("")
async def api_info():
    return cors_json({
        "success": True,
        "message": "Time tracking API is running",
        "endpoints": {
            "clock": "/api/time-tracking/clock",
            "status": "/api/time-tracking/status/:staffId"
        }
    }, INFO_METHODS)


@router.options("")
async def api_info_options():
    return preflight(INFO_METHODS)


@router.get("/clock")
async def clock_usage():
    return cors_json({
        "message": "Use POST method to clock in/out",
        "endpoint": "/api/time-tracking/clock",
        "required": {"staffId": "string", "action": " | ".join(VALID_ACTIONS)}
    }, CLOCK_METHODS)


@router.post("/clock")
async def clock(payload: ClockRequest, store: TimeEntryStore = Depends(get_store)):
    """Record one clock action for a staff member"""
    logger.info("Clock action request: staffId=%s action=%s", payload.staffId, payload.action.value)

    entry_id = await store.record_event(payload.staffId, payload.action.value)

    logger.info("Clock action recorded with id %s", entry_id)
    return cors_json(ClockResponse(success=True, id=entry_id).model_dump(exclude_none=True), CLOCK_METHODS)


@router.options("/clock")
async def clock_options():
    return preflight(CLOCK_METHODS)


@router.get("/status/{staff_id}")
async def clock_status(staff_id: str, store: TimeEntryStore = Depends(get_store)):
    """Current clock state (most recent action) of a staff member"""
    action = await resolve_status(store, staff_id)
    return cors_json(StatusResponse(success=True, action=action).model_dump(exclude_none=True), STATUS_METHODS)


@router.options("/status/{staff_id}")
async def clock_status_options(staff_id: str):
    return preflight(STATUS_METHODS)
