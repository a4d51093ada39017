"""
Tests for the CSV spreadsheet and text summary of a report.
"""
from __future__ import annotations

import csv
import io
from datetime import date

from tasktimer.domain.report.aggregator import aggregate
from tasktimer.domain.report.export import EMPTY_PERIOD, export_filename, render_summary, render_table, to_csv
from tasktimer.domain.report.models import DateRange


def _report():
    return aggregate(
        [
            {"task_name": "taskA", "start_date": "2026-10-12", "elapsed_time": "01:00:00"},
            {"task_name": "taskB", "start_date": "2026-10-12", "elapsed_time": "00:15:00"},
            {"task_name": "taskA", "start_date": "2026-10-13", "elapsed_time": "00:30:00"},
        ]
    )


def test_csv_layout():
    text = to_csv(_report())
    lines = text.splitlines()
    assert lines[0] == "Date,Total Time,Tasks"
    assert lines[1] == '"Oct 12, 2026",1h 15m,taskA: 1h 0m; taskB: 15m'
    assert lines[2] == '"Oct 13, 2026",30m,taskA: 30m'
    assert lines[3] == "Total,1h 45m,"
    assert len(lines) == 4


def test_csv_quotes_cells_with_commas():
    report = aggregate([{"task_name": "Read, write", "start_date": "2026-10-12", "elapsed_time": "00:05:00"}])
    rows = list(csv.reader(io.StringIO(to_csv(report))))
    assert rows[1] == ["Oct 12, 2026", "5m", "Read, write: 5m"]
    assert '"Read, write: 5m"' in to_csv(report)


def test_csv_of_empty_report_has_header_and_total():
    assert to_csv(aggregate([])).splitlines() == ["Date,Total Time,Tasks", "Total,0m,"]


def test_summary_text():
    rng = DateRange("week", date(2026, 10, 12), date(2026, 10, 18))
    text = render_summary(_report(), rng)
    assert text.splitlines()[0] == "Task Time Report (WEEK)"
    assert "Total Time: 1h 45m" in text
    assert "Period: Oct 12, 2026 - Oct 18, 2026" in text
    assert text.index("- taskA: 1h 30m") < text.index("- taskB: 15m")


def test_table_text():
    text = render_table(_report())
    assert "Oct 12, 2026 (1h 15m)" in text
    assert "  taskB: 15m" in text
    assert text.splitlines()[-1] == "Total: 1h 45m"
    assert render_table(aggregate([])) == EMPTY_PERIOD


def test_export_filename():
    assert export_filename("spreadsheet", "week", date(2026, 10, 17), "csv") == "task-time-spreadsheet-week-2026-10-17.csv"


def test_chart_png_for_report_and_empty_report():
    from tasktimer.infra.chart import day_label, render_daily_hours_png

    assert day_label("2026-10-05") == "Oct 5"
    for report in (_report(), aggregate([])):
        png = render_daily_hours_png(report, title="Task Time Report (WEEK)")
        assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_chart_rendering_is_independent_per_call():
    """Charts rendered side by side in threads come out the same as one at a time."""
    from concurrent.futures import ThreadPoolExecutor

    import matplotlib.pyplot as plt

    from tasktimer.infra.chart import render_daily_hours_png

    reports = [_report(), aggregate([])] * 4
    serial = [render_daily_hours_png(r, title=f"chart {i}") for i, r in enumerate(reports)]
    figures_before = plt.get_fignums()

    with ThreadPoolExecutor(max_workers=4) as pool:
        threaded = list(pool.map(lambda ir: render_daily_hours_png(ir[1], title=f"chart {ir[0]}"), enumerate(reports)))

    assert threaded == serial
    assert plt.get_fignums() == figures_before
