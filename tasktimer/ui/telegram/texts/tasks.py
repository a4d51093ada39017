MENU = "Choose an action."
NO_TASKS = "No tasks yet. Create one with /new."
TASKS_HEADER = "Your tasks:"
NOT_STARTED = "Not started"
ASK_NEW_NAME = "Send the new name for the task."
CONFIRM_DELETE = "Are you sure you want to delete this task? This action cannot be undone."
DELETED = "Task deleted."
NO_HISTORY = "No history for this task yet."
ALREADY_RUNNING = "Timer is already running."
NOT_RUNNING = "Timer is not running."
CANCELLED = "Cancelled."
NOT_AUTHORIZED = "Not authorized."
