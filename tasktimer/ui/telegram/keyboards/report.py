from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tasktimer.constants import RANGE_SELECTORS

RANGE_LABELS = {
    "day": "Today",
    "week": "This week",
    "month": "This month",
    "ytd": "Year to date",
}


def range_kb(prefix: str = "rp:show") -> InlineKeyboardMarkup:
    """callback_data: f"{prefix}:<range>" """
    kb = InlineKeyboardBuilder()
    for r in RANGE_SELECTORS:
        kb.button(text=RANGE_LABELS[r], callback_data=f"{prefix}:{r}")
    kb.adjust(2, 2)
    return kb.as_markup()


def report_actions_kb(selector: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Chart", callback_data=f"rp:chart:{selector}")
    kb.button(text="Spreadsheet", callback_data=f"rp:table:{selector}")
    kb.button(text="Download CSV", callback_data=f"rp:csv:{selector}")
    kb.button(text="Change range", callback_data="rp:menu")
    kb.adjust(2, 1, 1)
    return kb.as_markup()
