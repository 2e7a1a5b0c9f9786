"""Orchestration layer between the ports and the pure core.

Each workflow fetches snapshots through the ports, calls into the core, and
delivers results through the notifier. Proactive checks are recorded in the
run store.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import partial
from typing import Any, Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .adapters import (
    FileRunStore,
    HttpCalendarAdapter,
    InMemoryRunStore,
    InMemoryTaskRepository,
    JsonTaskRepository,
    LogNotifier,
    StubCalendarAdapter,
    WebhookNotifier,
)
from .config import Config
from .core.briefing import (
    assemble_briefing,
    format_briefing,
    format_calendar_review,
    format_meeting_reminder,
    format_task_alert,
    upcoming_meetings,
)
from .core.calendar import Conflict, Event, TimeSlot, compute_availability, detect_conflicts, find_tight_transitions
from .core.prioritization import PrioritizationResult, ScoringCriteria, prioritize_tasks
from .core.scheduling import ScheduleResult, SchedulingPreferences, intelligent_schedule
from .core.tasks import filter_overdue
from .ports import CalendarRepository, Notifier, RunRecord, RunStore, TaskRepository
from .settle import SettledBatch, settle

logger = logging.getLogger(__name__)

MEETING_LEAD_MINUTES = 60


@dataclass
class Services:
    """The collaborators a workflow needs."""

    tasks: TaskRepository
    calendar: CalendarRepository
    notifier: Notifier
    runs: RunStore


def get_timezone(config: Config) -> ZoneInfo:
    try:
        return ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {config.timezone!r}, using UTC")
        return ZoneInfo("UTC")


def now_in(config: Config) -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(get_timezone(config))


def build_services(config: Config) -> Services:
    """Pick the live or stub variant of each port from configuration."""
    tz = get_timezone(config)

    if config.tasks_file:
        tasks = JsonTaskRepository(config.tasks_file, tz=tz)
    else:
        logger.info("No TASKS_FILE configured - using empty stub task list")
        tasks = InMemoryTaskRepository()

    if config.calendar_api_url:
        calendar = HttpCalendarAdapter(config.calendar_api_url, config.calendar_api_token, tz=tz)
    else:
        logger.info("No CALENDAR_API_URL configured - using stub calendar")
        calendar = StubCalendarAdapter(tz=tz)

    if config.notify_webhook_url:
        notifier = WebhookNotifier(config.notify_webhook_url)
    else:
        notifier = LogNotifier()

    runs = FileRunStore(config.run_log_file) if config.run_log_file else InMemoryRunStore()

    return Services(tasks=tasks, calendar=calendar, notifier=notifier, runs=runs)


def record_run(runs: RunStore, name: str, fn: Callable[[], Any]) -> Any:
    """Run fn, record the outcome, and re-raise failures."""
    started = datetime.now(timezone.utc)
    try:
        result = fn()
    except Exception as e:
        runs.record(RunRecord(name, started, datetime.now(timezone.utc), success=False, detail=str(e)))
        raise
    detail = "" if result is None else str(result)[:200]
    runs.record(RunRecord(name, started, datetime.now(timezone.utc), success=True, detail=detail))
    return result


# ============== Data gathering ==============


def gather_day_events(
    calendar: CalendarRepository,
    days: list[date],
    max_workers: int | None = None,
) -> dict[date, list[Event]]:
    """
    Fetch several days in parallel.

    Days whose fetch fails are logged and left out of the result.
    """
    batch = settle(
        {d.isoformat(): partial(calendar.fetch_day, d) for d in days},
        max_workers=max_workers,
    )
    for failed in batch.failed:
        logger.warning(f"Treating {failed.name} as unavailable: {failed.error}")
    return {date.fromisoformat(r.name): r.value for r in batch.succeeded}


# ============== Queries ==============


def prioritize(
    services: Services,
    config: Config,
    as_of: datetime,
    subset_ids=None,
    criteria: ScoringCriteria | None = None,
    exclude_inactive: bool = False,
) -> PrioritizationResult:
    tasks = services.tasks.fetch_all()
    return prioritize_tasks(
        tasks,
        criteria or config.criteria,
        subset_ids,
        as_of=as_of,
        exclude_inactive=exclude_inactive,
    )


def check_availability(
    services: Services,
    config: Config,
    target_date: date,
    duration_minutes: int | None = None,
) -> list[TimeSlot]:
    if duration_minutes is None:
        duration_minutes = config.meeting_duration
    events = services.calendar.fetch_day(target_date)
    return compute_availability(
        events,
        target_date,
        duration_minutes,
        working_hours=config.working_hours,
        strict=config.strict_working_hours,
        step_minutes=config.slot_step_minutes,
        tz=get_timezone(config),
    )


def day_conflicts(services: Services, target_date: date) -> list[Conflict]:
    return detect_conflicts(services.calendar.fetch_day(target_date))


def find_meeting_times(
    services: Services,
    config: Config,
    today: date,
    duration_minutes: int | None = None,
    preferences: SchedulingPreferences | None = None,
) -> ScheduleResult:
    """Rank the next HORIZON_DAYS days for a meeting of the given length."""
    preferences = preferences or SchedulingPreferences.from_times(config.preferred_times)
    if duration_minutes is None:
        duration_minutes = config.meeting_duration
    days = [today + timedelta(days=i) for i in range(1, config.horizon_days + 1)]
    per_day = gather_day_events(services.calendar, days, max_workers=config.fetch_workers)
    return intelligent_schedule(
        per_day,
        duration_minutes,
        preferences,
        config.horizon_days,
        today=today,
        working_hours=config.working_hours,
        strict=config.strict_working_hours,
        step_minutes=config.slot_step_minutes,
        tz=get_timezone(config),
    )


# ============== Proactive checks ==============


def generate_daily_briefing(services: Services, config: Config, now: datetime, send: bool = True) -> str:
    """Assemble today's briefing and optionally deliver it."""
    tasks = services.tasks.fetch_all()
    events = services.calendar.fetch_day(now.date())
    data = assemble_briefing(
        tasks,
        events,
        now,
        working_hours=config.working_hours,
        criteria=config.criteria,
    )
    text = format_briefing(data, now)
    if send:
        services.notifier.send_message(f"Daily Briefing - {now.date().isoformat()}", text)
        logger.info("Daily briefing sent")
    return text


def check_urgent_tasks(services: Services, config: Config, now: datetime) -> bool:
    """Alert about critical and overdue tasks. Returns True if an alert was sent."""
    tasks = services.tasks.fetch_all()
    result = prioritize_tasks(tasks, config.criteria, as_of=now, exclude_inactive=True)
    critical = [r for r in result.prioritized_tasks if r.band == "critical"]
    overdue = filter_overdue(tasks, now)

    if not critical and not overdue:
        logger.info("No urgent tasks")
        return False

    services.notifier.send_message(
        "Task Alert: Urgent Items Require Attention",
        format_task_alert(critical, overdue),
    )
    logger.info(f"Task alert sent: {len(critical)} urgent, {len(overdue)} overdue")
    return True


def review_week_calendar(services: Services, config: Config, now: datetime) -> bool:
    """
    Look for conflicts and tight transitions over the coming week.

    Returns True if suggestions were sent.
    """
    today = now.date()
    days = [today + timedelta(days=i) for i in range(1, 8)]
    per_day = gather_day_events(services.calendar, days, max_workers=config.fetch_workers)

    conflicts: list[Conflict] = []
    suggestions: list[str] = []
    for day in sorted(per_day):
        found = detect_conflicts(per_day[day])
        conflicts.extend(found)
        for c in found:
            suggestions.append(f'Reschedule "{c.first.title}" or "{c.second.title}" on {day.strftime("%A")}')
        for t in find_tight_transitions(per_day[day], config.buffer_minutes):
            suggestions.append(t.suggestion())

    if not suggestions:
        logger.info("Calendar for the coming week has no conflicts")
        return False

    services.notifier.send_message(
        "Weekly Calendar Optimization Suggestions",
        format_calendar_review(conflicts, suggestions),
    )
    logger.info(f"Calendar review sent: {len(conflicts)} conflicts, {len(suggestions)} suggestions")
    return True


def prepare_meetings(services: Services, config: Config, now: datetime) -> int:
    """
    Remind about meetings starting in the next 45-60 minutes.

    Runs every 15 minutes, so each meeting falls in exactly one window.
    Returns the number of reminders sent.
    """
    horizon = now + timedelta(minutes=MEETING_LEAD_MINUTES)
    events: list[Event] = []
    for day in sorted({now.date(), horizon.date()}):
        events.extend(services.calendar.fetch_day(day))

    meetings = upcoming_meetings(events, now, MEETING_LEAD_MINUTES)
    for event in meetings:
        services.notifier.send_message(
            f"Meeting Reminder: {event.title}",
            format_meeting_reminder(event, MEETING_LEAD_MINUTES),
        )
    if meetings:
        logger.info(f"Sent {len(meetings)} meeting reminder(s)")
    return len(meetings)


PROACTIVE_ACTIONS: dict[str, Callable[[Services, Config, datetime], Any]] = {
    "daily_briefing": generate_daily_briefing,
    "task_reminder": check_urgent_tasks,
    "calendar_optimization": review_week_calendar,
    "meeting_preparation": prepare_meetings,
}


def trigger_proactive_action(
    action_type: str,
    services: Services,
    config: Config,
    now: datetime | None = None,
) -> bool:
    """
    Run one proactive action by name and record it.

    Never raises: failures are logged and reported as False.
    """
    action = PROACTIVE_ACTIONS.get(action_type)
    if action is None:
        logger.warning(f"Unknown proactive action type: {action_type}")
        return False

    now = now or now_in(config)
    logger.info(f"Triggering proactive action: {action_type}")
    try:
        record_run(services.runs, action_type, partial(action, services, config, now))
    except Exception:
        logger.exception(f"Error triggering proactive action {action_type}")
        return False
    return True


def run_proactive_checks(services: Services, config: Config, now: datetime | None = None) -> SettledBatch:
    """Run every proactive action independently and tally the outcomes."""
    now = now or now_in(config)
    jobs = {
        name: partial(record_run, services.runs, name, partial(action, services, config, now))
        for name, action in PROACTIVE_ACTIONS.items()
    }
    batch = settle(jobs, max_workers=config.fetch_workers)
    tally = batch.tally()
    logger.info(f"Proactive checks: {tally['succeeded']} succeeded, {tally['failed']} failed")
    return batch
