from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tasktimer.constants import PRIORITY_OPTIONS, SORT_FIELDS
from tasktimer.domain.timer.models import Task, TaskSort

SORT_LABELS = {
    "name": "Name",
    "last_start_time": "Last start",
    "total_elapsed_time": "Total time",
    "priority": "Priority",
}


def tasks_list_kb(tasks: Sequence[Task]) -> InlineKeyboardMarkup:
    """
    One row per task: open the task card, plus a start/stop toggle.
    callback_data:
      - tk:open:<id>
      - tk:start:<id> / tk:stop:<id>
    """
    kb = InlineKeyboardBuilder()
    for t in tasks:
        kb.button(text=f"{t.name} [{t.priority}]", callback_data=f"tk:open:{t.id}")
        if t.is_running:
            kb.button(text="⏹", callback_data=f"tk:stop:{t.id}")
        else:
            kb.button(text="▶️", callback_data=f"tk:start:{t.id}")
    kb.button(text="➕ New task", callback_data="tk:new")
    kb.button(text="Sort", callback_data="tk:sortmenu")
    kb.adjust(*([2] * len(tasks)), 2)
    return kb.as_markup()


def task_card_kb(task: Task) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    if task.is_running:
        kb.button(text="⏹ Stop", callback_data=f"tk:stop:{task.id}")
    else:
        kb.button(text="▶️ Start", callback_data=f"tk:start:{task.id}")
    kb.button(text="✏️ Rename", callback_data=f"tk:ren:{task.id}")
    kb.button(text="Priority", callback_data=f"tk:pri:{task.id}")
    kb.button(text="History", callback_data=f"tk:hist:{task.id}")
    kb.button(text="🗑️ Delete", callback_data=f"tk:del:{task.id}")
    kb.button(text="« Tasks", callback_data="tk:list")
    kb.adjust(1, 2, 2, 1)
    return kb.as_markup()


def priority_kb(task: Task) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for p in PRIORITY_OPTIONS:
        label = f"• {p}" if p == task.priority else p
        kb.button(text=label, callback_data=f"tk:setpri:{task.id}:{p}")
    kb.button(text="« Back", callback_data=f"tk:open:{task.id}")
    kb.adjust(len(PRIORITY_OPTIONS), 1)
    return kb.as_markup()


def delete_confirm_kb(task: Task) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Delete", callback_data=f"tk:delok:{task.id}")
    kb.button(text="Cancel", callback_data=f"tk:open:{task.id}")
    kb.adjust(2)
    return kb.as_markup()


def sort_kb(current: TaskSort) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for field in SORT_FIELDS:
        label = SORT_LABELS[field]
        if field == current.field:
            label += " ↑" if current.ascending else " ↓"
        kb.button(text=label, callback_data=f"tk:sort:{field}")
    kb.adjust(2, 2)
    return kb.as_markup()
