"""Tests for core task logic."""

from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta, timezone

import pytest

from agenda.core.tasks import (
    Priority,
    Status,
    Task,
    filter_active,
    filter_by_ids,
    filter_overdue,
    suggest_priority_adjustments,
    urgency_score,
)


# Fixtures
@pytest.fixture
def as_of():
    return datetime(2025, 1, 15, 12, 0)


@pytest.fixture
def make_task():
    """Factory for creating tasks."""
    def _make(task_id="1", title="Task", **kwargs) -> Task:
        return Task(id=task_id, title=title, **kwargs)
    return _make


class TestTask:
    def test_completed_requires_completed_at(self, make_task):
        with pytest.raises(ValueError):
            make_task(status=Status.COMPLETED)

    def test_completed_with_timestamp(self, make_task, as_of):
        task = make_task(status=Status.COMPLETED, completed_at=as_of)
        assert task.is_active is False

    def test_cancelled_is_inactive(self, make_task):
        assert make_task(status=Status.CANCELLED).is_active is False

    def test_is_overdue(self, make_task, as_of):
        assert make_task(due_date=as_of - timedelta(days=1)).is_overdue(as_of) is True
        assert make_task(due_date=as_of + timedelta(hours=1)).is_overdue(as_of) is False
        assert make_task().is_overdue(as_of) is False

    def test_inactive_task_is_never_overdue(self, make_task, as_of):
        task = make_task(
            status=Status.COMPLETED,
            due_date=as_of - timedelta(days=3),
            completed_at=as_of - timedelta(days=4),
        )
        assert task.is_overdue(as_of) is False

    def test_days_until_due_rounds_up(self, make_task, as_of):
        assert make_task(due_date=as_of + timedelta(days=1, hours=12)).days_until_due(as_of) == 2
        assert make_task(due_date=as_of - timedelta(days=1)).days_until_due(as_of) == -1
        assert make_task().days_until_due(as_of) is None

    def test_immutable(self, make_task):
        task = make_task("1")
        with pytest.raises(FrozenInstanceError):
            task.id = "2"
        assert replace(task, title="Renamed").id == "1"

    def test_priority_weight(self):
        assert [p.weight for p in Priority] == [1, 2, 3, 4]


class TestTaskFromDict:
    def test_camel_case(self):
        task = Task.from_dict(
            {
                "id": 1,
                "title": "Write report",
                "priority": "urgent",
                "status": "in-progress",
                "dueDate": "2025-01-16T09:00:00Z",
                "estimatedDuration": 45,
                "dependencies": ["a", 2],
            }
        )
        assert task.id == "1"
        assert task.priority is Priority.URGENT
        assert task.status is Status.IN_PROGRESS
        assert task.due_date == datetime(2025, 1, 16, 9, 0, tzinfo=timezone.utc)
        assert task.estimated_duration == 45
        assert task.dependencies == ("a", "2")

    def test_snake_case_and_defaults(self):
        task = Task.from_dict({"id": "x", "title": "Plan", "due_date": "2025-01-20T10:00:00"})
        assert task.priority is Priority.MEDIUM
        assert task.status is Status.PENDING
        assert task.due_date == datetime(2025, 1, 20, 10, 0)
        assert task.estimated_duration is None
        assert task.dependencies == ()

    def test_invalid_priority(self):
        with pytest.raises(ValueError):
            Task.from_dict({"id": "x", "title": "Plan", "priority": "someday"})

    def test_missing_id(self):
        with pytest.raises(KeyError):
            Task.from_dict({"title": "Plan"})

    def test_to_dict_uses_camel_case(self, as_of):
        data = Task(id="1", title="Plan", due_date=as_of).to_dict()
        assert data["dueDate"] == "2025-01-15T12:00:00"
        assert data["status"] == "pending"
        assert data["completedAt"] is None


class TestFilters:
    def test_filter_active(self, make_task, as_of):
        tasks = [
            make_task("1"),
            make_task("2", status=Status.CANCELLED),
            make_task("3", status=Status.COMPLETED, completed_at=as_of),
            make_task("4", status=Status.IN_PROGRESS),
        ]
        assert [t.id for t in filter_active(tasks)] == ["1", "4"]

    def test_filter_overdue(self, make_task, as_of):
        tasks = [
            make_task("1", due_date=as_of - timedelta(days=1)),
            make_task("2", due_date=as_of + timedelta(days=1)),
            make_task("3"),
        ]
        assert [t.id for t in filter_overdue(tasks, as_of)] == ["1"]

    def test_filter_by_ids_ignores_unknown(self, make_task):
        tasks = [make_task("1"), make_task("2"), make_task("3")]
        assert [t.id for t in filter_by_ids(tasks, ["3", "1", "missing"])] == ["1", "3"]


class TestUrgencyScore:
    def test_priority_only(self, make_task, as_of):
        assert urgency_score(make_task(priority=Priority.URGENT), as_of) == 100
        assert urgency_score(make_task(priority=Priority.LOW), as_of) == 25

    def test_deadline_bonus(self, make_task, as_of):
        assert urgency_score(make_task(due_date=as_of - timedelta(hours=1)), as_of) == 100
        assert urgency_score(make_task(due_date=as_of + timedelta(days=1)), as_of) == 80
        assert urgency_score(make_task(due_date=as_of + timedelta(days=2)), as_of) == 65
        assert urgency_score(make_task(due_date=as_of + timedelta(days=6)), as_of) == 55
        assert urgency_score(make_task(due_date=as_of + timedelta(days=20)), as_of) == 50


class TestSuggestPriorityAdjustments:
    def test_approaching_deadline_raises_to_urgent(self, make_task, as_of):
        task = make_task(priority=Priority.HIGH, due_date=as_of + timedelta(days=1))
        [suggestion] = suggest_priority_adjustments([task], as_of)
        assert suggestion.current is Priority.HIGH
        assert suggestion.suggested is Priority.URGENT
        assert suggestion.reason == "Task has high urgency score due to approaching deadline"

    def test_overdue_raises_to_urgent(self, make_task, as_of):
        task = make_task(priority=Priority.MEDIUM, due_date=as_of - timedelta(days=2))
        [suggestion] = suggest_priority_adjustments([task], as_of)
        assert suggestion.suggested is Priority.URGENT
        assert suggestion.reason == "Task is overdue"

    def test_low_priority_raised_to_medium(self, make_task, as_of):
        task = make_task(priority=Priority.LOW, due_date=as_of - timedelta(days=2))
        [suggestion] = suggest_priority_adjustments([task], as_of)
        assert suggestion.suggested is Priority.MEDIUM
        assert suggestion.reason == "Task urgency has increased"

    def test_no_change_needed(self, make_task, as_of):
        tasks = [
            make_task("1", priority=Priority.URGENT, due_date=as_of - timedelta(days=1)),
            make_task("2", priority=Priority.HIGH),
            make_task("3", priority=Priority.LOW, due_date=as_of + timedelta(days=30)),
        ]
        assert suggest_priority_adjustments(tasks, as_of) == []

    def test_inactive_tasks_skipped(self, make_task, as_of):
        task = make_task(
            priority=Priority.LOW,
            status=Status.COMPLETED,
            due_date=as_of - timedelta(days=2),
            completed_at=as_of,
        )
        assert suggest_priority_adjustments([task], as_of) == []
