from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tasktimer.domain.common.errors import DomainError
from tasktimer.domain.session import SessionContext
from tasktimer.domain.timer.models import TaskSort
from tasktimer.domain.timer.rules import default_sort, next_sort, validate_sort
from tasktimer.domain.timer.service import TimerService
from tasktimer.infra.clock.system_clock import SystemClock
from tasktimer.ui.telegram import texts
from tasktimer.ui.telegram.handlers._common import show_error
from tasktimer.ui.telegram.keyboards.common import cancel_kb
from tasktimer.ui.telegram.keyboards.tasks import (
    delete_confirm_kb,
    priority_kb,
    sort_kb,
    task_card_kb,
    tasks_list_kb,
)
from tasktimer.ui.telegram.states.tasks import TasksFlow
from tasktimer.ui.telegram.views import render_history, render_task_card, render_tasks
from tasktimer.utils import command_args, parse_callback_data

logger = logging.getLogger(__name__)

router = Router()


async def _current_sort(state: FSMContext) -> TaskSort:
    data = await state.get_data()
    field, order = data.get("sort_field"), data.get("sort_order")
    if not field or not order:
        return default_sort()
    try:
        return validate_sort(field, order)
    except DomainError:
        return default_sort()


def _task_id(cb: CallbackQuery) -> str:
    parts = parse_callback_data(cb.data or "", expected_parts=3)
    return parts[2] if parts else ""


async def _send_list(
    target: Message,
    *,
    timer_service: TimerService,
    session: SessionContext,
    clock: SystemClock,
    state: FSMContext,
    prefer_edit: bool = False,
) -> None:
    sort = await _current_sort(state)
    tasks = await timer_service.list_tasks(session.require_user(), sort)
    text = render_tasks(tasks, [timer_service.live_elapsed_ms(t) for t in tasks], clock.tz)
    markup = tasks_list_kb(tasks)

    if prefer_edit:
        try:
            await target.edit_text(text, reply_markup=markup)
            return
        except Exception:
            # message too old or unchanged: fall back to a new message
            logger.debug("Task list edit failed, sending new message", exc_info=True)
    await target.answer(text, reply_markup=markup)


async def _refresh_list(target: Message, **deps) -> None:
    try:
        await _send_list(target, **deps)
    except DomainError as e:
        await show_error(target, e)


async def _send_card(target: Message, task_id: str, timer_service: TimerService, session: SessionContext, clock: SystemClock) -> None:
    task = await timer_service.get_task(session.require_user(), task_id)
    text = render_task_card(task, timer_service.live_elapsed_ms(task), clock.tz)
    await target.answer(text, reply_markup=task_card_kb(task))


# ----- list / sort -----


@router.message(Command("tasks"))
async def tasks_cmd(message: Message, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await state.set_state(None)
    try:
        await _send_list(message, timer_service=timer_service, session=session, clock=clock, state=state)
    except DomainError as e:
        await show_error(message, e)


@router.callback_query(F.data == "tk:list")
async def tasks_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    try:
        await _send_list(cb.message, timer_service=timer_service, session=session, clock=clock, state=state, prefer_edit=True)
    except DomainError as e:
        await show_error(cb.message, e)


@router.message(Command("sort"))
async def sort_cmd(message: Message, state: FSMContext):
    await state.set_state(None)
    await message.answer("Sort tasks by:", reply_markup=sort_kb(await _current_sort(state)))


@router.callback_query(F.data == "tk:sortmenu")
async def sort_menu_cb(cb: CallbackQuery, state: FSMContext):
    await cb.answer()
    await cb.message.answer("Sort tasks by:", reply_markup=sort_kb(await _current_sort(state)))


@router.callback_query(F.data.startswith("tk:sort:"))
async def sort_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    field = _task_id(cb)
    try:
        sort = next_sort(await _current_sort(state), field)
        await state.update_data(sort_field=sort.field, sort_order=sort.order)
        await _send_list(cb.message, timer_service=timer_service, session=session, clock=clock, state=state, prefer_edit=True)
    except DomainError as e:
        await show_error(cb.message, e)


# ----- create / open -----


@router.message(Command("new"))
async def new_cmd(message: Message, state: FSMContext, timer_service: TimerService, session: SessionContext):
    await _create(message, state, timer_service, session)


@router.callback_query(F.data == "tk:new")
async def new_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext):
    await cb.answer()
    await _create(cb.message, state, timer_service, session)


async def _create(target: Message, state: FSMContext, timer_service: TimerService, session: SessionContext) -> None:
    try:
        task = await timer_service.create_task(session.require_user())
    except DomainError as e:
        await show_error(target, e)
        return
    # a new task goes straight into name editing
    await state.set_state(TasksFlow.rename)
    await state.update_data(task_id=task.id)
    await target.answer(f"Created \"{task.name}\". {texts.tasks.ASK_NEW_NAME}", reply_markup=cancel_kb())


@router.callback_query(F.data.startswith("tk:open:"))
async def open_cb(cb: CallbackQuery, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    try:
        await _send_card(cb.message, _task_id(cb), timer_service, session, clock)
    except DomainError as e:
        await show_error(cb.message, e)


# ----- timer -----


@router.callback_query(F.data.startswith("tk:start:"))
async def start_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    task_id = _task_id(cb)
    try:
        before = await timer_service.get_task(session.require_user(), task_id)
        if before.is_running:
            await cb.answer(texts.tasks.ALREADY_RUNNING)
            return
        await timer_service.start(session.require_user(), task_id)
    except DomainError as e:
        await cb.answer()
        await show_error(cb.message, e)
        return
    await cb.answer("Started")
    await _refresh_list(cb.message, timer_service=timer_service, session=session, clock=clock, state=state, prefer_edit=True)


@router.callback_query(F.data.startswith("tk:stop:"))
async def stop_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    try:
        result = await timer_service.stop(session.require_user(), _task_id(cb))
    except DomainError as e:
        await cb.answer()
        await show_error(cb.message, e)
        return
    if result is None:
        await cb.answer(texts.tasks.NOT_RUNNING)
        return
    await cb.answer(f"Stopped, total {result.task.total_elapsed_time}")
    await _refresh_list(cb.message, timer_service=timer_service, session=session, clock=clock, state=state, prefer_edit=True)


# ----- rename -----


@router.callback_query(F.data.startswith("tk:ren:"))
async def rename_cb(cb: CallbackQuery, state: FSMContext):
    await cb.answer()
    await state.set_state(TasksFlow.rename)
    await state.update_data(task_id=_task_id(cb))
    await cb.message.answer(texts.tasks.ASK_NEW_NAME, reply_markup=cancel_kb())


# commands fall through to their own handlers
@router.message(TasksFlow.rename, F.text, ~F.text.startswith("/"))
async def rename_enter(message: Message, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    data = await state.get_data()
    task_id = data.get("task_id", "")
    try:
        # empty names are ignored by the service; the task keeps its old name
        task = await timer_service.rename(session.require_user(), task_id, message.text or "")
    except DomainError as e:
        await show_error(message, e)
        return
    await state.set_state(None)
    await message.answer(render_task_card(task, timer_service.live_elapsed_ms(task), clock.tz), reply_markup=task_card_kb(task))


# ----- priority -----


@router.callback_query(F.data.startswith("tk:pri:"))
async def priority_cb(cb: CallbackQuery, timer_service: TimerService, session: SessionContext):
    await cb.answer()
    try:
        task = await timer_service.get_task(session.require_user(), _task_id(cb))
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(f"Priority for {task.name}:", reply_markup=priority_kb(task))


@router.callback_query(F.data.startswith("tk:setpri:"))
async def set_priority_cb(cb: CallbackQuery, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    parts = parse_callback_data(cb.data or "", expected_parts=4)
    if not parts:
        return
    _, _, task_id, priority = parts
    try:
        task = await timer_service.set_priority(session.require_user(), task_id, priority)
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(render_task_card(task, timer_service.live_elapsed_ms(task), clock.tz), reply_markup=task_card_kb(task))


# ----- history -----


@router.callback_query(F.data.startswith("tk:hist:"))
async def history_cb(cb: CallbackQuery, timer_service: TimerService, session: SessionContext):
    await cb.answer()
    try:
        user_id = session.require_user()
        task = await timer_service.get_task(user_id, _task_id(cb))
        entries = await timer_service.task_history(user_id, task.id)
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(render_history(task, entries))


@router.message(Command("history"))
async def history_cmd(message: Message, state: FSMContext, timer_service: TimerService, session: SessionContext):
    await state.set_state(None)
    query = command_args(message.text).casefold()
    if not query:
        await message.answer("Usage: /history <task name>")
        return
    try:
        user_id = session.require_user()
        tasks = await timer_service.list_tasks(user_id, await _current_sort(state))
        matches = [t for t in tasks if query in t.name.casefold()]
        if not matches:
            await message.answer("No task matches that name.")
            return
        task = matches[0]
        entries = await timer_service.task_history(user_id, task.id)
    except DomainError as e:
        await show_error(message, e)
        return
    await message.answer(render_history(task, entries))


# ----- delete -----


@router.callback_query(F.data.startswith("tk:del:"))
async def delete_cb(cb: CallbackQuery, timer_service: TimerService, session: SessionContext):
    await cb.answer()
    try:
        task = await timer_service.get_task(session.require_user(), _task_id(cb))
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(f"{task.name}\n{texts.tasks.CONFIRM_DELETE}", reply_markup=delete_confirm_kb(task))


@router.callback_query(F.data.startswith("tk:delok:"))
async def delete_confirm_cb(cb: CallbackQuery, state: FSMContext, timer_service: TimerService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    try:
        await timer_service.delete(session.require_user(), _task_id(cb))
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(texts.tasks.DELETED)
    await _refresh_list(cb.message, timer_service=timer_service, session=session, clock=clock, state=state)
