from __future__ import annotations

import asyncio
import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile, CallbackQuery, Message

from tasktimer.constants import DEFAULT_RANGE, RANGE_SELECTORS
from tasktimer.domain.common.errors import DomainError
from tasktimer.domain.report.export import export_filename, render_summary, render_table, to_csv
from tasktimer.domain.report.service import ReportService
from tasktimer.domain.session import SessionContext
from tasktimer.infra.chart import render_daily_hours_png
from tasktimer.infra.clock.system_clock import SystemClock
from tasktimer.ui.telegram import texts
from tasktimer.ui.telegram.handlers._common import show_error
from tasktimer.ui.telegram.keyboards.report import range_kb, report_actions_kb
from tasktimer.utils import command_args, parse_callback_data

logger = logging.getLogger(__name__)

router = Router()


def _selector(cb: CallbackQuery) -> str:
    parts = parse_callback_data(cb.data or "", expected_parts=3)
    return parts[2] if parts else DEFAULT_RANGE


@router.message(Command("report"))
async def report_cmd(message: Message, state: FSMContext, report_service: ReportService, session: SessionContext):
    await state.set_state(None)
    selector = command_args(message.text).lower()
    if selector not in RANGE_SELECTORS:
        await message.answer(texts.report.CHOOSE_RANGE, reply_markup=range_kb())
        return
    await _send_summary(message, selector, report_service, session)


@router.callback_query(F.data == "rp:menu")
async def report_menu_cb(cb: CallbackQuery):
    await cb.answer()
    await cb.message.answer(texts.report.CHOOSE_RANGE, reply_markup=range_kb())


@router.callback_query(F.data.startswith("rp:show:"))
async def report_show_cb(cb: CallbackQuery, report_service: ReportService, session: SessionContext):
    await cb.answer()
    await _send_summary(cb.message, _selector(cb), report_service, session)


async def _send_summary(target: Message, selector: str, report_service: ReportService, session: SessionContext) -> None:
    try:
        built = await report_service.build(session.require_user(), selector)
    except DomainError as e:
        await show_error(target, e)
        return
    await target.answer(render_summary(built.report, built.range), reply_markup=report_actions_kb(selector))


@router.callback_query(F.data.startswith("rp:table:"))
async def report_table_cb(cb: CallbackQuery, report_service: ReportService, session: SessionContext):
    await cb.answer()
    try:
        built = await report_service.build(session.require_user(), _selector(cb))
    except DomainError as e:
        await show_error(cb.message, e)
        return
    await cb.message.answer(render_table(built.report))


@router.callback_query(F.data.startswith("rp:chart:"))
async def report_chart_cb(cb: CallbackQuery, report_service: ReportService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    selector = _selector(cb)
    try:
        built = await report_service.build(session.require_user(), selector)
    except DomainError as e:
        await show_error(cb.message, e)
        return

    # matplotlib is blocking; keep it off the event loop
    png = await asyncio.to_thread(render_daily_hours_png, built.report)
    filename = export_filename("report", selector, clock.today(), "png")
    await cb.message.answer_photo(BufferedInputFile(png, filename=filename), caption=texts.report.CHART_CAPTION)


@router.callback_query(F.data.startswith("rp:csv:"))
async def report_csv_cb(cb: CallbackQuery, report_service: ReportService, session: SessionContext, clock: SystemClock):
    await cb.answer()
    selector = _selector(cb)
    try:
        built = await report_service.build(session.require_user(), selector)
    except DomainError as e:
        await show_error(cb.message, e)
        return

    filename = export_filename("spreadsheet", selector, clock.today(), "csv")
    data = to_csv(built.report).encode("utf-8")
    logger.info(f"CSV export: {filename} ({len(data)} bytes)")
    await cb.message.answer_document(BufferedInputFile(data, filename=filename))
