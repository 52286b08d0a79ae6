from datetime import datetime
from typing import Callable, Optional

from time_tracking.models.time_entry import DEFAULT_STATUS, TimeAction
from time_tracking.widget.client import TimeTrackingClient

STATUS_TEXT = {
    TimeAction.CLOCK_IN: "Clocked in",
    TimeAction.CLOCK_OUT: "Clocked out",
    TimeAction.BREAK: "On break",
    TimeAction.LUNCH: "At lunch",
}

# Breaks and lunches can only start from the clocked-in state
BREAK_ACTIONS = (TimeAction.BREAK, TimeAction.LUNCH)
BREAK_REFUSALS = {
    TimeAction.BREAK: "Clock in before taking a break.",
    TimeAction.LUNCH: "Clock in before going to lunch.",
}


def success_message(action: TimeAction, now: datetime) -> str:
    if action == TimeAction.CLOCK_IN:
        return f"Successfully clocked in at {now.strftime('%H:%M')}"
    if action == TimeAction.CLOCK_OUT:
        return "You have clocked out. Have a great day!"
    if action == TimeAction.BREAK:
        return "Break started. Remember to clock back in when you return."
    return "Enjoy your lunch! Don't forget to clock back in afterward."


class ClockWidget:
    """
    State behind the POS clock-in/out screen for one staff member.

    Each accepted press sends exactly one event. Clocking out has to be
    confirmed. Pressing the action the staff member is already in, or
    starting a break or lunch while not clocked in, is refused locally
    without contacting the server.
    """

    def __init__(self, client: TimeTrackingClient, staff_id: str, clock: Callable[[], datetime] = datetime.now):
        self.client = client
        self.staff_id = staff_id
        self.clock = clock
        self.last_action = DEFAULT_STATUS
        self.pending_action: Optional[TimeAction] = None
        self.status_message = ""
        self.debug_message = ""

    @property
    def status_text(self) -> str:
        try:
            return STATUS_TEXT[TimeAction(self.last_action)]
        except ValueError:
            return "Unknown"

    @property
    def awaiting_confirmation(self) -> bool:
        return self.pending_action is not None

    def load(self) -> bool:
        """Check the API is reachable, then pick up the staff member's current status."""
        self.debug_message = "Testing connection..."
        test_result = self.client.test_connection()
        if not test_result.get("success"):
            self.debug_message = f"Connection test failed: {test_result.get('error')}"
            return False

        result = self.client.get_last_clock_action(self.staff_id)
        if not result.get("success"):
            self.debug_message = f"Status error: {result.get('error')}"
            return False

        try:
            self.last_action = TimeAction(result["action"])
            self.debug_message = ""
        except ValueError:
            # Kept as-is; status_text shows "Unknown" until a valid press replaces it
            self.last_action = result["action"]
            self.debug_message = f"Unrecognised status: {result['action']}"
        return True

    def press(self, action) -> bool:
        """Handle a button press. Returns True when an event was recorded."""
        action = TimeAction(action)

        if action == TimeAction.CLOCK_OUT and not self.awaiting_confirmation:
            self.pending_action = action
            self.status_message = "Are you sure you want to clock out?"
            return False

        self.pending_action = None

        if self.last_action == action:
            self.status_message = f"You are already {STATUS_TEXT[action].lower()}!"
            return False

        if action in BREAK_ACTIONS and self.last_action != TimeAction.CLOCK_IN:
            self.status_message = BREAK_REFUSALS[action]
            return False

        return self._send(action)

    def confirm(self) -> bool:
        if not self.awaiting_confirmation:
            return False
        return self.press(self.pending_action)

    def cancel(self):
        self.pending_action = None
        self.status_message = ""

    def _send(self, action: TimeAction) -> bool:
        self.debug_message = "Sending request..."
        result = self.client.record_clock_event(self.staff_id, action.value)

        if not result.get("success"):
            error = result.get("error")
            self.status_message = f"Failed to {action.value.replace('_', ' ')}. {error}"
            self.debug_message = f"Error details: {error}"
            return False

        self.last_action = action
        self.debug_message = ""
        self.status_message = success_message(action, self.clock())
        return True
