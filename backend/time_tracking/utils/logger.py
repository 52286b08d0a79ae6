import logging
from datetime import datetime
from typing import Dict, Any, Optional

from time_tracking.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("time_tracking")


async def log_event(
    db,
    action: str,
    details: Optional[Dict[str, Any]] = None,
    staff_id: Optional[str] = None
):
    """
    Log an admin event to both the application logger and the activity_logs collection
    """
    log_message = f"Action: {action}"
    if staff_id:
        log_message += f" | Staff: {staff_id}"
    if details:
        log_message += f" | Details: {details}"

    logger.info(log_message)

    if db is None:
        return

    try:
        await db["activity_logs"].insert_one({
            "action": action,
            "details": details or {},
            "staffId": staff_id,
            "timestamp": datetime.utcnow()
        })
    except Exception as e:
        # Audit trail failures must not fail the admin operation itself
        logger.error(f"Failed to write activity log: {e}")


def log_error(message: str, error: Exception, staff_id: Optional[str] = None):
    """
    Log an error with context
    """
    error_message = f"Error: {message} | Exception: {str(error)}"
    if staff_id:
        error_message += f" | Staff: {staff_id}"

    logger.error(error_message)


def log_warning(message: str, staff_id: Optional[str] = None):
    warning_message = f"Warning: {message}"
    if staff_id:
        warning_message += f" | Staff: {staff_id}"

    logger.warning(warning_message)


def log_debug(message: str, details: Optional[Dict[str, Any]] = None):
    debug_message = f"Debug: {message}"
    if details:
        debug_message += f" | Details: {details}"

    logger.debug(debug_message)


# Event type constants for the activity log
class EventTypes:
    ENTRY_CREATED = "time_entry_created"
    ENTRY_UPDATED = "time_entry_updated"
    ENTRY_DELETED = "time_entry_deleted"

    STAFF_CREATED = "staff_created"

    REPORT_EXPORTED = "report_exported"
