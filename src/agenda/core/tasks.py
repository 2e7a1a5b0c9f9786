"""Pure task domain logic - no I/O dependencies."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .calendar import parse_timestamp


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def weight(self) -> int:
        """Numeric weight: low=1 .. urgent=4."""
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.URGENT: 4,
}


class Status(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Task:
    """A task to be ranked. Immutable; use dataclasses.replace to derive changes."""

    id: str
    title: str
    priority: Priority = Priority.MEDIUM
    status: Status = Status.PENDING
    due_date: datetime | None = None
    estimated_duration: int | None = None
    dependencies: tuple[str, ...] = ()
    completed_at: datetime | None = None

    def __post_init__(self):
        if self.status is Status.COMPLETED and self.completed_at is None:
            raise ValueError(f"Task {self.id!r} is completed but has no completed_at")

    @property
    def is_active(self) -> bool:
        """Completed and cancelled tasks are inactive."""
        return self.status not in (Status.COMPLETED, Status.CANCELLED)

    def is_overdue(self, as_of: datetime) -> bool:
        """Active with a due date already passed."""
        return self.is_active and self.due_date is not None and self.due_date < as_of

    def days_until_due(self, as_of: datetime) -> int | None:
        """Whole days until due, rounded up (negative if overdue)."""
        if self.due_date is None:
            return None
        return math.ceil((self.due_date - as_of).total_seconds() / 86400)

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create a Task from a JSON-style mapping (camelCase or snake_case keys)."""

        def _get(*keys):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        due = _get("dueDate", "due_date")
        completed = _get("completedAt", "completed_at")
        duration = _get("estimatedDuration", "estimated_duration")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            priority=Priority(data.get("priority") or "medium"),
            status=Status(data.get("status") or "pending"),
            due_date=parse_timestamp(due) if due else None,
            estimated_duration=int(duration) if duration is not None else None,
            dependencies=tuple(str(d) for d in (data.get("dependencies") or [])),
            completed_at=parse_timestamp(completed) if completed else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "status": self.status.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "estimatedDuration": self.estimated_duration,
            "dependencies": list(self.dependencies),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }


def filter_active(tasks: list[Task]) -> list[Task]:
    """Drop completed and cancelled tasks."""
    return [t for t in tasks if t.is_active]


def filter_overdue(tasks: list[Task], as_of: datetime) -> list[Task]:
    """Filter to overdue tasks only."""
    return [t for t in tasks if t.is_overdue(as_of)]


def filter_by_ids(tasks: list[Task], ids) -> list[Task]:
    """Restrict to tasks whose id is in ids. Unknown ids are ignored."""
    wanted = set(ids)
    return [t for t in tasks if t.id in wanted]


def urgency_score(task: Task, as_of: datetime) -> int:
    """
    Quick urgency estimate from declared priority and deadline.

    priority weight * 25, plus 50 when due now or overdue, 30 within a day,
    15 within three days, 5 within a week.
    """
    score = task.priority.weight * 25
    days = task.days_until_due(as_of)
    if days is not None:
        if days <= 0:
            score += 50
        elif days <= 1:
            score += 30
        elif days <= 3:
            score += 15
        elif days <= 7:
            score += 5
    return score


@dataclass
class PriorityAdjustment:
    """A suggested change to a task's declared priority."""

    task: Task
    current: Priority
    suggested: Priority
    reason: str


def suggest_priority_adjustments(tasks: list[Task], as_of: datetime) -> list[PriorityAdjustment]:
    """
    Suggest raising declared priorities that lag behind deadline urgency.

    Pure function - no I/O.
    """
    suggestions = []
    for task in filter_active(tasks):
        score = urgency_score(task, as_of)
        current = task.priority
        suggested = None
        reason = ""

        if score >= 80 and current is not Priority.URGENT:
            suggested = Priority.URGENT
            if task.is_overdue(as_of):
                reason = "Task is overdue"
            else:
                reason = "Task has high urgency score due to approaching deadline"
        elif score >= 60 and current is Priority.LOW:
            suggested = Priority.MEDIUM
            reason = "Task urgency has increased"

        if suggested is not None and suggested is not current:
            suggestions.append(PriorityAdjustment(task, current, suggested, reason))

    return suggestions
