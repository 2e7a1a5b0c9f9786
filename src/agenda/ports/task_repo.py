"""Task repository interface."""

from typing import Protocol

from agenda.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for fetching tasks from any backend."""

    def fetch_all(self) -> list[Task]:
        """Fetch a snapshot of all tasks."""
        ...
