from time_tracking.exceptions import DegradedRead
from time_tracking.models.time_entry import DEFAULT_STATUS
from time_tracking.services.time_entry_store import TimeEntryStore
from time_tracking.utils.logger import log_warning


async def resolve_status(store: TimeEntryStore, staff_id: str) -> str:
    """
    Current clock state of a staff member: the action of their newest event.

    Staff with no events, or whose ordered lookup the store cannot serve yet,
    are reported as clocked out.
    """
    try:
        last_event = await store.latest_event(staff_id)
    except DegradedRead as e:
        log_warning(f"Ordered status query unavailable, returning default ({e})", staff_id=staff_id)
        return DEFAULT_STATUS.value

    if last_event is None:
        return DEFAULT_STATUS.value
    return last_event.action
