"""Functional core - pure business logic with no I/O."""

from .errors import AgendaError, InvalidCriteria, InvalidDuration, InvalidInterval
from .tasks import Task, Priority, Status, filter_active, filter_overdue, suggest_priority_adjustments
from .calendar import (
    Event,
    TimeSlot,
    Conflict,
    WorkingHours,
    overlaps,
    detect_conflicts,
    compute_availability,
    find_tight_transitions,
)
from .prioritization import ScoringCriteria, ScoringProfile, PrioritizationResult, prioritize_tasks
from .scheduling import SchedulingPreferences, DaySuggestion, ScheduleResult, rank_days, intelligent_schedule
from .briefing import BriefingData, assemble_briefing, format_briefing, format_meeting_reminder, upcoming_meetings

__all__ = [
    # Errors
    "AgendaError",
    "InvalidCriteria",
    "InvalidDuration",
    "InvalidInterval",
    # Tasks
    "Task",
    "Priority",
    "Status",
    "filter_active",
    "filter_overdue",
    "suggest_priority_adjustments",
    # Calendar
    "Event",
    "TimeSlot",
    "Conflict",
    "WorkingHours",
    "overlaps",
    "detect_conflicts",
    "compute_availability",
    "find_tight_transitions",
    # Prioritization
    "ScoringCriteria",
    "ScoringProfile",
    "PrioritizationResult",
    "prioritize_tasks",
    # Scheduling
    "SchedulingPreferences",
    "DaySuggestion",
    "ScheduleResult",
    "rank_days",
    "intelligent_schedule",
    # Briefing
    "BriefingData",
    "assemble_briefing",
    "format_briefing",
    "format_meeting_reminder",
    "upcoming_meetings",
]
