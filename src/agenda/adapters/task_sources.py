"""Task source adapters - JSON file (live) and in-memory (stub)."""

import json
import logging
from dataclasses import replace
from datetime import datetime, tzinfo
from pathlib import Path

from agenda.core.errors import AgendaError
from agenda.core.tasks import Task

logger = logging.getLogger(__name__)


class TaskSourceError(AgendaError):
    """Raised when the task source cannot be read."""


class JsonTaskRepository:
    """
    Tasks stored in a JSON file.

    Implements TaskRepository protocol. The file holds either a list of task
    objects or {"tasks": [...]}. Malformed entries are skipped.
    """

    def __init__(self, path: Path | str, tz: tzinfo | None = None):
        self.path = Path(path).expanduser()
        self.tz = tz

    def _localize(self, dt: datetime | None) -> datetime | None:
        if dt is None or self.tz is None or dt.tzinfo is not None:
            return dt
        return dt.replace(tzinfo=self.tz)

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks from the file."""
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise TaskSourceError(f"Cannot read tasks from {self.path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("tasks", [])

        tasks = []
        for item in data:
            try:
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed task {item!r}: {e}")
                continue
            tasks.append(
                replace(task, due_date=self._localize(task.due_date), completed_at=self._localize(task.completed_at))
            )
        return tasks


class InMemoryTaskRepository:
    """
    Fixed list of tasks.

    Implements TaskRepository protocol. Used when no task file is configured
    and in tests.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self.tasks = list(tasks or [])

    def fetch_all(self) -> list[Task]:
        return list(self.tasks)
