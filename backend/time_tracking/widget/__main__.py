"""
Terminal front-end for the POS clock widget.

    python -m time_tracking.widget --staff-id john_doe status
    python -m time_tracking.widget --staff-id john_doe clock_in
    python -m time_tracking.widget --staff-id john_doe clock_out --yes
"""
import argparse
import sys

from time_tracking.config import settings
from time_tracking.models.time_entry import VALID_ACTIONS
from time_tracking.widget.client import TimeTrackingClient
from time_tracking.widget.clock_widget import ClockWidget


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="time_tracking.widget", description="Staff time tracking clock")
    parser.add_argument("command", choices=["status"] + VALID_ACTIONS)
    parser.add_argument("--staff-id", default="john_doe")
    parser.add_argument("--url", default=settings.API_URL, help="Time tracking API base URL")
    parser.add_argument("--yes", action="store_true", help="Confirm clocking out")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    widget = ClockWidget(TimeTrackingClient(args.url), args.staff_id)

    if not widget.load():
        print(widget.debug_message)
        return 1

    if args.command == "status":
        print(f"{widget.staff_id}: {widget.status_text}")
        return 0

    recorded = widget.press(args.command)
    if widget.awaiting_confirmation:
        if not args.yes:
            print(f"{widget.status_message} Re-run with --yes to confirm.")
            return 1
        recorded = widget.confirm()

    print(widget.status_message)
    return 0 if recorded else 1


if __name__ == "__main__":
    sys.exit(main())
