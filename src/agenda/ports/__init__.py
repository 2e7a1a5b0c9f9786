"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .calendar_repo import CalendarRepository
from .notifier import Notifier
from .run_store import RunRecord, RunStore

__all__ = [
    "TaskRepository",
    "CalendarRepository",
    "Notifier",
    "RunRecord",
    "RunStore",
]
