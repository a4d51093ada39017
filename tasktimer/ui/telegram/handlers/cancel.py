from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tasktimer.ui.telegram import texts
from tasktimer.ui.telegram.keyboards.common import main_menu_kb

router = Router()

CANCEL_WORDS = {"cancel"}


@router.message(Command("cancel"))
async def cancel_cmd(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(texts.tasks.CANCELLED, reply_markup=main_menu_kb())


@router.message(F.text.casefold().in_(CANCEL_WORDS))
async def cancel_text(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(texts.tasks.CANCELLED, reply_markup=main_menu_kb())


@router.callback_query(F.data == "cancel")
async def cancel_cb(cb: CallbackQuery, state: FSMContext):
    await cb.answer()
    await state.clear()
    await cb.message.answer(texts.tasks.CANCELLED, reply_markup=main_menu_kb())
