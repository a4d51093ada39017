"""
Server-side bar chart of per-day hours.
"""
from __future__ import annotations

import io
from datetime import date

from tasktimer.domain.report.models import Report


def day_label(day: str) -> str:
    """'2026-10-05' -> 'Oct 5'"""
    d = date.fromisoformat(day)
    return f"{d.strftime('%b')} {d.day}"


def render_daily_hours_png(report: Report, title: str = "Time Spent on Tasks") -> bytes:
    """
    Render per-day total hours as a PNG bar chart.

    Hours are fractional (hours + minutes/60) rounded to two decimals.
    An empty report renders a placeholder message instead of bars.
    """
    # no pyplot: charts render in worker threads
    from matplotlib.figure import Figure

    fig = Figure(figsize=(8, 4))
    ax = fig.subplots()
    if not report.entries:
        ax.text(0.5, 0.5, "No time recorded", ha="center", va="center", fontsize=12, color="gray")
        ax.axis("off")
    else:
        labels = [day_label(e.date) for e in report.entries]
        values = report.chart_series()
        ax.bar(range(len(labels)), values, color=(59 / 255, 130 / 255, 246 / 255, 0.5), edgecolor=(59 / 255, 130 / 255, 246 / 255))
        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        ax.set_ylabel("Hours")
        ax.set_ylim(bottom=0)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
    ax.set_title(title)

    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=100, bbox_inches="tight")
    buf.seek(0)
    return buf.read()
