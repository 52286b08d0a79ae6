from fastapi import APIRouter, Depends, Request
from datetime import datetime

from time_tracking.config import settings
from time_tracking.db import get_store
from time_tracking.exceptions import StoreUnavailable
from time_tracking.services.status_resolver import resolve_status
from time_tracking.services.time_entry_store import TimeEntryStore
from time_tracking.utils.cors import cors_json, preflight

router = APIRouter()

TEST_METHODS = ["GET", "OPTIONS"]
PROBE_METHODS = ["GET", "OPTIONS"]

# Staff id used for the store probe read; it never has entries of its own
PROBE_STAFF_ID = "test-user"


@router.get("/api/test")
async def api_test(request: Request):
    """
    Liveness probe used by the POS widget before it loads status
    """
    return cors_json({
        "success": True,
        "message": "API test endpoint is working",
        "timestamp": datetime.utcnow().isoformat(),
        "method": request.method
    }, TEST_METHODS)


@router.options("/api/test")
async def api_test_options():
    return preflight(TEST_METHODS)


@router.get("/api/store-status")
async def store_status(store: TimeEntryStore = Depends(get_store)):
    """
    Store configuration flags plus a probe read through the status resolver
    """
    status = {
        "env": {
            "hasConnectionUri": settings.store_configured,
            "database": settings.MONGODB_DB,
        },
        "store": {
            "initialized": False,
            "error": None
        }
    }

    try:
        await store.ping()
        status["lastAction"] = {
            "success": True,
            "action": await resolve_status(store, PROBE_STAFF_ID)
        }
        status["store"]["initialized"] = True
    except StoreUnavailable as e:
        status["store"]["error"] = e.message

    return status


@router.options("/api/store-status")
async def store_status_options():
    return preflight(PROBE_METHODS)


@router.get("/health/live")
async def liveness_check():
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat()
    }


@router.options("/health/live")
async def liveness_options():
    return preflight(PROBE_METHODS)
