from tasktimer.ui.telegram.texts import report, tasks

__all__ = ["report", "tasks"]
