from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

DISMISS_CB = "dismiss"


def main_menu_kb() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Tasks", callback_data="tk:list")
    kb.button(text="New task", callback_data="tk:new")
    kb.button(text="Report", callback_data="rp:menu")
    kb.adjust(2, 1)
    return kb.as_markup()


def dismiss_kb() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Dismiss", callback_data=DISMISS_CB)
    return kb.as_markup()


def cancel_kb(prefix: str = "cancel") -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Cancel", callback_data=prefix)
    kb.adjust(1)
    return kb.as_markup()
