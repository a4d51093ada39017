from __future__ import annotations

from typing import Optional

from tasktimer.constants import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    PRIORITY_OPTIONS,
    SORT_ASC,
    SORT_DESC,
    SORT_FIELDS,
)
from tasktimer.domain.common.errors import ValidationError
from tasktimer.domain.timer.models import TaskSort

MAX_NAME_LENGTH = 200


def clean_name(name: Optional[str]) -> Optional[str]:
    """Trimmed task name, or None when the edit should be ignored."""
    cleaned = (name or "").strip()
    if not cleaned:
        return None
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(f"Task name is too long (max {MAX_NAME_LENGTH} chars).")
    return cleaned


def validate_priority(priority: str) -> str:
    value = (priority or "").strip().upper()
    if value not in PRIORITY_OPTIONS:
        raise ValidationError(f"Priority must be one of {', '.join(PRIORITY_OPTIONS)}.")
    return value


def validate_sort(field: str, order: str) -> TaskSort:
    if field not in SORT_FIELDS:
        raise ValidationError(f"Unknown sort field: {field}")
    if order not in (SORT_ASC, SORT_DESC):
        raise ValidationError(f"Unknown sort order: {order}")
    return TaskSort(field=field, order=order)


def default_sort() -> TaskSort:
    return TaskSort(field=DEFAULT_SORT_FIELD, order=DEFAULT_SORT_ORDER)


def next_sort(current: TaskSort, field: str) -> TaskSort:
    """Same field flips the order; a new field starts ascending."""
    if field == current.field:
        order = SORT_ASC if current.order == SORT_DESC else SORT_DESC
        return validate_sort(field, order)
    return validate_sort(field, SORT_ASC)
