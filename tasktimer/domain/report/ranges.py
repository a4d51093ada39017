from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from tasktimer.constants import RANGE_DAY, RANGE_MONTH, RANGE_SELECTORS, RANGE_WEEK
from tasktimer.domain.common.errors import ValidationError
from tasktimer.domain.report.models import DateRange


def compute_range(selector: str, now: datetime) -> DateRange:
    """
    Inclusive calendar-day window for a selector, anchored at local `now`.

      day   -> today
      week  -> Monday..Sunday containing today
      month -> first..last day of this month
      ytd   -> Jan 1..Dec 31 of this year
    """
    if selector not in RANGE_SELECTORS:
        raise ValidationError(f"Unknown range: {selector}")

    today = now.date()
    if selector == RANGE_DAY:
        return DateRange(selector, today, today)
    if selector == RANGE_WEEK:
        monday = today - timedelta(days=today.weekday())
        return DateRange(selector, monday, monday + timedelta(days=6))
    if selector == RANGE_MONTH:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return DateRange(selector, today.replace(day=1), today.replace(day=last_day))
    # ytd
    return DateRange(selector, date(today.year, 1, 1), date(today.year, 12, 31))
