import csv
import io
from datetime import datetime
from typing import Iterable, Optional

from time_tracking.models.time_entry import TimeEntry
from time_tracking.schemas.analytics import StaffReport

ENTRY_HEADERS = ["Staff ID", "Action", "Date", "Time"]
DAILY_HEADERS = ["Date", "Clock In", "Clock Out", "Hours", "Breaks", "Lunch"]


def _time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M:%S") if value else ""


def entries_to_csv(entries: Iterable[TimeEntry]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(ENTRY_HEADERS)
    for entry in entries:
        writer.writerow([
            entry.staffId,
            entry.action,
            entry.date,
            _time(entry.timestamp)
        ])

    csv_content = output.getvalue()
    output.close()
    return csv_content


def staff_report_to_csv(report: StaffReport) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(["Report Type", "Staff Report"])
    writer.writerow(["Staff ID", report.staffId])
    writer.writerow(["Period Start", report.period.startDate if report.period else ""])
    writer.writerow(["Period End", report.period.endDate if report.period else ""])
    writer.writerow(["Total Hours", f"{report.totalHours:.2f}"])
    writer.writerow(["Average Hours", f"{report.averageHours:.2f}"])
    writer.writerow(["Breaks Taken", report.breaksTaken])
    writer.writerow(["Lunch Breaks", report.lunchBreaks])
    writer.writerow([])
    writer.writerow(["Daily Breakdown"])
    writer.writerow(DAILY_HEADERS)

    for date, daily in report.dailyBreakdown.items():
        writer.writerow([
            date,
            _time(daily.clockIn),
            _time(daily.clockOut),
            f"{daily.hours:.2f}",
            daily.breaks,
            daily.lunch
        ])

    csv_content = output.getvalue()
    output.close()
    return csv_content
