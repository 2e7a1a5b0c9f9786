"""Multi-day meeting slot ranking - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, time, timedelta, tzinfo
from typing import Callable

from .calendar import Event, TimeSlot, WorkingHours, compute_availability
from .errors import InvalidDuration


@dataclass(frozen=True)
class SchedulingPreferences:
    """What the requester would like: preferred hours of day and a priority."""

    preferred_hours: tuple[int, ...] = ()
    priority: str = "medium"

    @classmethod
    def from_times(cls, times: list[str], priority: str = "medium") -> "SchedulingPreferences":
        """Build from "HH:MM" strings; only the hour is used."""
        hours = tuple(time.fromisoformat(t.strip()).hour for t in times if t.strip())
        return cls(preferred_hours=hours, priority=priority)


@dataclass(frozen=True)
class SlotScoring:
    """Constants for day scoring."""

    per_slot: float = 10
    preference_bonus: float = 20
    preference_window_hours: int = 1
    priority_multipliers: dict = field(default_factory=lambda: {"high": 1.5, "low": 0.8})


DEFAULT_SLOT_SCORING = SlotScoring()


@dataclass
class DaySuggestion:
    """A day worth proposing, with its best slots."""

    date: date
    slots: list[TimeSlot]
    score: float
    total_slots: int


@dataclass
class ScheduleResult:
    duration_minutes: int
    suggestions: list[DaySuggestion]

    @property
    def recommendation(self) -> DaySuggestion | None:
        """Best day, or None if no day had availability."""
        return self.suggestions[0] if self.suggestions else None


def score_day(
    slots: list[TimeSlot],
    preferences: SchedulingPreferences,
    scoring: SlotScoring = DEFAULT_SLOT_SCORING,
) -> float:
    """
    Score a day's availability.

    Each slot is worth per_slot. Every (slot, preferred hour) pair within the
    preference window adds preference_bonus. The total is then scaled by the
    request priority.
    """
    score = len(slots) * scoring.per_slot
    for slot in slots:
        for hour in preferences.preferred_hours:
            if abs(slot.start.hour - hour) <= scoring.preference_window_hours:
                score += scoring.preference_bonus
    return score * scoring.priority_multipliers.get(preferences.priority, 1.0)


def rank_days(
    availability_for: Callable[[date], list[TimeSlot]],
    today: date,
    horizon_days: int = 7,
    preferences: SchedulingPreferences | None = None,
    duration_minutes: int = 60,
    max_slots: int = 3,
    scoring: SlotScoring = DEFAULT_SLOT_SCORING,
) -> ScheduleResult:
    """
    Rank the days after today by how well they fit the request.

    Days without availability are dropped. Each suggestion keeps its first
    max_slots slots, but all slots count toward the score. Equal scores keep
    chronological order.

    Pure function - availability_for supplies the slots.
    """
    if horizon_days < 1:
        raise InvalidDuration(f"Horizon must be at least one day, got {horizon_days}")
    preferences = preferences or SchedulingPreferences()

    suggestions = []
    for offset in range(1, horizon_days + 1):
        day = today + timedelta(days=offset)
        slots = availability_for(day)
        if not slots:
            continue
        suggestions.append(
            DaySuggestion(
                date=day,
                slots=slots[:max_slots],
                score=score_day(slots, preferences, scoring),
                total_slots=len(slots),
            )
        )

    suggestions.sort(key=lambda s: s.score, reverse=True)
    return ScheduleResult(duration_minutes=duration_minutes, suggestions=suggestions)


def intelligent_schedule(
    per_day_events: dict[date, list[Event]],
    duration_minutes: int,
    preferences: SchedulingPreferences | None = None,
    horizon_days: int = 7,
    *,
    today: date,
    working_hours: WorkingHours | None = None,
    strict: bool = False,
    step_minutes: int = 60,
    tz: tzinfo | None = None,
    max_slots: int = 3,
    scoring: SlotScoring = DEFAULT_SLOT_SCORING,
) -> ScheduleResult:
    """
    Suggest meeting days over the horizon from known per-day events.

    A day missing from per_day_events is unknown (for example its fetch
    failed) and is treated as having no availability.
    """
    if duration_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {duration_minutes}")

    def availability_for(day: date) -> list[TimeSlot]:
        if day not in per_day_events:
            return []
        return compute_availability(
            per_day_events[day],
            day,
            duration_minutes,
            working_hours=working_hours,
            strict=strict,
            step_minutes=step_minutes,
            tz=tz,
        )

    return rank_days(
        availability_for,
        today,
        horizon_days=horizon_days,
        preferences=preferences,
        duration_minutes=duration_minutes,
        max_slots=max_slots,
        scoring=scoring,
    )
