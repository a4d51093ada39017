"""
Report snapshots: CSV spreadsheet and plain-text summary.
"""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import List

from tasktimer.domain.report.models import DateRange, Report
from tasktimer.domain.timer.formatting import format_time

CSV_HEADER = ["Date", "Total Time", "Tasks"]
EMPTY_PERIOD = "No time recorded in this period."


def format_report_date(d: date) -> str:
    """'Oct 5, 2026'"""
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def to_csv(report: Report) -> str:
    """
    Date,Total Time,Tasks rows, one per day, then a Total row.

    Tasks are "name: Hh Mm" joined with "; ". Cells holding a comma (the
    dates always do) are quoted.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in report.entries:
        tasks = "; ".join(f"{t.name}: {format_time(t.hours, t.minutes)}" for t in entry.tasks)
        writer.writerow(
            [
                format_report_date(date.fromisoformat(entry.date)),
                format_time(entry.hours, entry.minutes),
                tasks,
            ]
        )
    writer.writerow(["Total", format_time(report.total_hours, report.total_minutes), ""])
    return buf.getvalue()


def render_summary(report: Report, rng: DateRange) -> str:
    lines: List[str] = [
        f"Task Time Report ({rng.selector.upper()})",
        "",
        "Summary",
        f"Total Time: {format_time(report.total_hours, report.total_minutes)}",
        f"Period: {format_report_date(rng.start)} - {format_report_date(rng.end)}",
        "",
        "Top Tasks",
    ]
    if report.top_tasks:
        for t in report.top_tasks:
            lines.append(f"- {t.name}: {format_time(t.hours, t.minutes)}")
    else:
        lines.append("- none")
    return "\n".join(lines)


def render_table(report: Report) -> str:
    """Spreadsheet view as text: one block per day."""
    if not report.entries:
        return EMPTY_PERIOD
    lines: List[str] = []
    for entry in report.entries:
        day = format_report_date(date.fromisoformat(entry.date))
        lines.append(f"{day} ({format_time(entry.hours, entry.minutes)})")
        for t in entry.tasks:
            lines.append(f"  {t.name}: {format_time(t.hours, t.minutes)}")
    lines.append(f"Total: {format_time(report.total_hours, report.total_minutes)}")
    return "\n".join(lines)


def export_filename(kind: str, selector: str, today: date, ext: str) -> str:
    """task-time-<kind>-<range>-<YYYY-MM-DD>.<ext>"""
    return f"task-time-{kind}-{selector}-{today.isoformat()}.{ext}"
