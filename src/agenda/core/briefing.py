"""Pure briefing assembly logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime

from .calendar import (
    Conflict,
    Event,
    TimeSlot,
    WorkingHours,
    compute_availability,
    detect_conflicts,
    sort_events_by_start,
)
from .prioritization import PrioritizedTask, ScoringCriteria, prioritize_tasks
from .tasks import Task, filter_overdue


@dataclass
class BriefingData:
    """Assembled briefing data ready for formatting."""

    date: date
    day_of_week: str
    priority_tasks: list[PrioritizedTask]
    overdue_tasks: list[Task]
    events: list[Event]
    conflicts: list[Conflict]
    free_slots: list[TimeSlot]
    suggestions: list[str]


def daily_suggestions(
    events: list[Event],
    priority_tasks: list[PrioritizedTask],
    overdue_tasks: list[Task],
    as_of: datetime,
) -> list[str]:
    """Time-management nudges for the day."""
    suggestions = []
    if len(events) > 5:
        suggestions.append("Consider blocking time for deep work between meetings")
    if len(priority_tasks) > 3:
        suggestions.append("Consider delegating some high-priority tasks")
    if overdue_tasks:
        suggestions.append(f"Address {len(overdue_tasks)} overdue tasks today")
    if as_of.hour < 10:
        suggestions.append("Start with your most important task while energy is high")
    return suggestions


def assemble_briefing(
    tasks: list[Task],
    events: list[Event],
    as_of: datetime,
    working_hours: WorkingHours | None = None,
    criteria: ScoringCriteria | None = None,
    slot_minutes: int = 30,
    max_tasks: int = 5,
) -> BriefingData:
    """
    Assemble briefing data from raw tasks and today's events.

    Pure function - no I/O. Handles ranking, conflict detection and free slots.
    """
    today = as_of.date()
    ranked = prioritize_tasks(tasks, criteria, as_of=as_of, exclude_inactive=True)
    top = ranked.prioritized_tasks[:max_tasks]
    overdue = filter_overdue(tasks, as_of)
    free_slots = compute_availability(
        events,
        today,
        slot_minutes,
        working_hours=working_hours,
        strict=True,
        step_minutes=slot_minutes,
        tz=as_of.tzinfo,
    )

    return BriefingData(
        date=today,
        day_of_week=today.strftime("%A"),
        priority_tasks=top,
        overdue_tasks=overdue,
        events=sorted(events, key=lambda e: e.start),
        conflicts=detect_conflicts(events),
        free_slots=free_slots,
        suggestions=daily_suggestions(events, top, overdue, as_of),
    )


def format_task_line(item: PrioritizedTask, as_of: datetime) -> str:
    """
    Format a single ranked task for display.

    Pure function - no I/O.
    """
    task = item.task
    days = task.days_until_due(as_of)
    if days is None:
        due = "no due date"
    elif task.is_overdue(as_of):
        due = "OVERDUE"
    elif days == 0:
        due = "due TODAY"
    else:
        due = f"due in {days}d"
    return f"- [{item.score:.0f}] {task.title} ({task.priority.value}, {due}) - {item.recommendation}"


def format_event_line(event: Event) -> str:
    location = f" @ {event.location}" if event.location else ""
    return f"- {event.format_time()} {event.title}{location}"


def format_briefing(data: BriefingData, as_of: datetime) -> str:
    """
    Format briefing data as markdown.

    Pure function - no I/O.
    """
    schedule_md = "\n".join(format_event_line(e) for e in data.events) or "No meetings scheduled for today."
    tasks_md = "\n".join(format_task_line(t, as_of) for t in data.priority_tasks) or "No priority tasks for today."
    free_md = ", ".join(s.format() for s in data.free_slots) or "No free slots today."

    sections = [
        f"# Daily Briefing - {data.day_of_week}, {data.date.strftime('%B %d, %Y')}",
        f"## Today's Schedule\n{schedule_md}",
        f"## Priority Tasks\n{tasks_md}",
        f"## Free Time\n{free_md}",
    ]
    if data.conflicts:
        conflicts_md = "\n".join(f"- {c.describe()}" for c in data.conflicts)
        sections.append(f"## Conflicts\n{conflicts_md}")
    if data.suggestions:
        suggestions_md = "\n".join(f"- {s}" for s in data.suggestions)
        sections.append(f"## Suggestions\n{suggestions_md}")
    return "\n\n".join(sections)


def format_task_alert(critical: list[PrioritizedTask], overdue: list[Task]) -> str:
    """Alert body for tasks needing attention."""
    sections = ["# Task Alert"]
    if critical:
        lines = "\n".join(
            f"- {r.task.title} (due: {r.task.due_date.date().isoformat() if r.task.due_date else 'No due date'})"
            for r in critical
        )
        sections.append(f"## Urgent Tasks\n{lines}")
    if overdue:
        lines = "\n".join(f"- {t.title} (was due: {t.due_date.date().isoformat()})" for t in overdue)
        sections.append(f"## Overdue Tasks\n{lines}")
    sections.append("Please review and prioritize these tasks.")
    return "\n\n".join(sections)


def format_calendar_review(conflicts: list[Conflict], suggestions: list[str]) -> str:
    """Body for the weekly calendar review."""
    sections = ["# Weekly Calendar Review"]
    if conflicts:
        lines = "\n".join(f"- {c.first.start.strftime('%a %m/%d')}: {c.describe()}" for c in conflicts)
        sections.append(f"## Scheduling Conflicts\n{lines}")
    if suggestions:
        lines = "\n".join(f"- {s}" for s in suggestions)
        sections.append(f"## Suggestions\n{lines}")
    return "\n\n".join(sections)


def upcoming_meetings(
    events: list[Event],
    now: datetime,
    lead_minutes: int = 60,
    window_minutes: int = 15,
) -> list[Event]:
    """
    Events starting more than lead - window and at most lead minutes from now.

    Pure function - no I/O. All-day events are skipped.
    """
    earliest = lead_minutes - window_minutes
    found = []
    for event in sort_events_by_start(events):
        if event.all_day:
            continue
        minutes = (event.start - now).total_seconds() / 60
        if earliest < minutes <= lead_minutes:
            found.append(event)
    return found


def format_meeting_reminder(event: Event, lead_minutes: int = 60) -> str:
    """Reminder body for an upcoming meeting."""
    lines = [
        "# Meeting Preparation Reminder",
        f'Your meeting "{event.title}" starts in {lead_minutes} minutes.',
        f"- Time: {event.start.strftime('%A, %B %d %H:%M')}-{event.end.strftime('%H:%M')}",
    ]
    if event.location:
        lines.append(f"- Location: {event.location}")
    if event.attendees:
        lines.append(f"- Attendees: {', '.join(event.attendees)}")
    lines.append("Consider reviewing the agenda and preparing any necessary materials.")
    return "\n".join(lines)
