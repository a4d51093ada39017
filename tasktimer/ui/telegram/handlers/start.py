from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tasktimer.ui.telegram import texts
from tasktimer.ui.telegram.keyboards.common import DISMISS_CB, main_menu_kb

router = Router()


@router.message(CommandStart())
async def start_cmd(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(texts.tasks.MENU, reply_markup=main_menu_kb())


@router.message(Command("menu"))
async def menu_cmd(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(texts.tasks.MENU, reply_markup=main_menu_kb())


@router.callback_query(F.data == DISMISS_CB)
async def dismiss_cb(cb: CallbackQuery):
    await cb.answer()
    if cb.message:
        await cb.message.delete()
