"""
Constants for tasks, sorting and report ranges.
"""
from __future__ import annotations

# Task priorities (P1 = highest)
PRIORITY_OPTIONS = ("P1", "P2", "P3", "P4", "P5")

# New task defaults
DEFAULT_TASK_NAME = "New Task"
DEFAULT_PRIORITY = "P3"
ZERO_INTERVAL = "00:00:00"

# Task list sort fields (stored column names)
SORT_NAME = "name"
SORT_LAST_START = "last_start_time"
SORT_TOTAL_ELAPSED = "total_elapsed_time"
SORT_PRIORITY = "priority"
SORT_FIELDS = (SORT_NAME, SORT_LAST_START, SORT_TOTAL_ELAPSED, SORT_PRIORITY)

SORT_ASC = "asc"
SORT_DESC = "desc"

DEFAULT_SORT_FIELD = SORT_LAST_START
DEFAULT_SORT_ORDER = SORT_DESC

# Report range selectors
RANGE_DAY = "day"
RANGE_WEEK = "week"
RANGE_MONTH = "month"
RANGE_YTD = "ytd"
RANGE_SELECTORS = (RANGE_DAY, RANGE_WEEK, RANGE_MONTH, RANGE_YTD)

DEFAULT_RANGE = RANGE_WEEK

# Number of tasks shown in the report ranking
TOP_TASKS_LIMIT = 5
