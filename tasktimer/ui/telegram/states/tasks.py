from aiogram.fsm.state import StatesGroup, State


class TasksFlow(StatesGroup):
    rename = State()
