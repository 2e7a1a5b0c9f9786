"""Adapters - I/O implementations of ports."""

from .task_sources import JsonTaskRepository, InMemoryTaskRepository, TaskSourceError
from .calendar_sources import HttpCalendarAdapter, StubCalendarAdapter, CalendarSourceError
from .notifiers import WebhookNotifier, LogNotifier, NotificationError
from .run_stores import InMemoryRunStore, FileRunStore

__all__ = [
    "JsonTaskRepository",
    "InMemoryTaskRepository",
    "TaskSourceError",
    "HttpCalendarAdapter",
    "StubCalendarAdapter",
    "CalendarSourceError",
    "WebhookNotifier",
    "LogNotifier",
    "NotificationError",
    "InMemoryRunStore",
    "FileRunStore",
]
