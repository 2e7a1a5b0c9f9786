"""Pure calendar domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from .errors import InvalidDuration, InvalidInterval


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing Z."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Event:
    """A busy interval on the calendar."""

    title: str
    start: datetime
    end: datetime
    attendees: tuple[str, ...] = ()
    location: str = ""
    calendar: str = ""
    all_day: bool = False
    source: str = ""

    def format_time(self) -> str:
        """Format the event time for display."""
        if self.all_day:
            return "All day"
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    @classmethod
    def from_api(cls, data: dict, source: str = "") -> "Event":
        """
        Create an Event from a calendar API payload.

        Accepts either plain ISO strings or Google-style {"dateTime": ...} /
        {"date": ...} objects for start and end.
        """
        all_day = False

        def _when(value) -> datetime:
            nonlocal all_day
            if isinstance(value, dict):
                if value.get("dateTime"):
                    return parse_timestamp(value["dateTime"])
                all_day = True
                return datetime.combine(date.fromisoformat(value["date"]), time(0, 0))
            return parse_timestamp(value)

        attendees = []
        for a in data.get("attendees") or []:
            attendees.append(a.get("email", "") if isinstance(a, dict) else str(a))

        return cls(
            title=data.get("title") or data.get("summary") or "",
            start=_when(data["start"]),
            end=_when(data["end"]),
            attendees=tuple(attendees),
            location=data.get("location") or "",
            calendar=data.get("calendar") or "",
            all_day=all_day or bool(data.get("allDay", False)),
            source=source,
        )


@dataclass(frozen=True)
class TimeSlot:
    """A candidate time range of the requested duration."""

    start: datetime
    end: datetime

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def format(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')} ({self.duration_minutes()} min)"

    def contains(self, dt: datetime) -> bool:
        """Check if a datetime falls within this slot."""
        return self.start <= dt < self.end

    def overlaps(self, other) -> bool:
        """Check if this slot overlaps with another interval."""
        return overlaps(self, other)


@dataclass(frozen=True)
class Conflict:
    """Two events whose time ranges overlap."""

    first: Event
    second: Event

    def overlap_minutes(self) -> int:
        start = max(self.first.start, self.second.start)
        end = min(self.first.end, self.second.end)
        return int((end - start).total_seconds() / 60)

    def describe(self) -> str:
        return (
            f'"{self.first.title}" ({self.first.format_time()}) overlaps '
            f'"{self.second.title}" ({self.second.format_time()}) by {self.overlap_minutes()} min'
        )


@dataclass(frozen=True)
class Transition:
    """Two back-to-back events with too little buffer between them."""

    first: Event
    second: Event
    gap_minutes: int

    def suggestion(self) -> str:
        return f'Consider adding buffer time between "{self.first.title}" and "{self.second.title}"'


@dataclass(frozen=True)
class WorkingHours:
    """Daily working window."""

    start: time = time(9, 0)
    end: time = time(17, 0)

    @classmethod
    def parse(cls, value: str) -> "WorkingHours":
        """Parse "09:00-17:00"."""
        start_str, _, end_str = value.partition("-")
        if not end_str:
            raise ValueError(f"Invalid working hours: {value!r}")
        return cls(start=time.fromisoformat(start_str.strip()), end=time.fromisoformat(end_str.strip()))

    def format(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def window(self, target_date: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
        return (
            datetime.combine(target_date, self.start, tzinfo=tz),
            datetime.combine(target_date, self.end, tzinfo=tz),
        )


def overlaps(a, b) -> bool:
    """Half-open overlap test: [s1, e1) and [s2, e2) overlap iff s1 < e2 and s2 < e1."""
    return a.start < b.end and b.start < a.end


def validate_events(events: list[Event]) -> None:
    """Raise InvalidInterval for the first event that does not end after it starts."""
    for event in events:
        if event.start >= event.end:
            raise InvalidInterval(
                f"Event {event.title!r} has start {event.start.isoformat()} "
                f"not before end {event.end.isoformat()}"
            )


def sort_events_by_start(events: list[Event]) -> list[Event]:
    """Sort events by start time. Ties keep their original order."""
    return sorted(events, key=lambda e: e.start)


def filter_events_by_date(
    events: list[Event],
    start_date: date,
    end_date: date | None = None,
) -> list[Event]:
    """
    Filter events to those starting within a date range.

    Pure function - no I/O.
    """
    end_date = end_date or start_date
    return [e for e in events if start_date <= e.start.date() <= end_date]


def detect_conflicts(events: list[Event]) -> list[Conflict]:
    """
    Find overlapping neighbours in start order.

    Returns one Conflict per adjacent pair (a, b) with a.end > b.start.
    Touching events (a.end == b.start) do not conflict.
    Pure function - no I/O.
    """
    validate_events(events)
    ordered = sort_events_by_start(events)
    return [Conflict(a, b) for a, b in zip(ordered, ordered[1:]) if a.end > b.start]


def find_tight_transitions(events: list[Event], buffer_minutes: int = 15) -> list[Transition]:
    """
    Find neighbouring events separated by less than buffer_minutes.

    Overlapping and touching pairs are not reported; those are conflicts or
    deliberate back-to-backs.
    """
    validate_events(events)
    ordered = sort_events_by_start(events)
    transitions = []
    for a, b in zip(ordered, ordered[1:]):
        gap = (b.start - a.end).total_seconds() / 60
        if 0 < gap < buffer_minutes:
            transitions.append(Transition(a, b, int(gap)))
    return transitions


def compute_availability(
    events: list[Event],
    target_date: date,
    duration_minutes: int,
    working_hours: WorkingHours | None = None,
    strict: bool = False,
    step_minutes: int = 60,
    tz: tzinfo | None = None,
) -> list[TimeSlot]:
    """
    Find slots of the requested duration that overlap no event.

    Candidate starts walk the working window every step_minutes (whole hours
    by default). With strict=False a slot may run past the end of the window
    as long as it starts inside it.

    Pure function - no I/O.

    Args:
        events: Busy intervals; every candidate is tested against all of them
        target_date: Day to search
        duration_minutes: Length of each slot
        working_hours: Window to search (defaults to 09:00-17:00)
        strict: Require slots to end within the window
        step_minutes: Granularity of candidate start times
        tz: Timezone of the window (defaults to the first event's tzinfo)

    Returns:
        Pairwise disjoint TimeSlots in ascending order
    """
    if duration_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {duration_minutes}")
    if step_minutes <= 0:
        raise InvalidDuration(f"Step must be positive, got {step_minutes}")
    validate_events(events)

    working_hours = working_hours or WorkingHours()
    if tz is None and events:
        tz = events[0].start.tzinfo
    day_start, day_end = working_hours.window(target_date, tz)

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    slots: list[TimeSlot] = []
    current = day_start
    while current < day_end:
        slot = TimeSlot(start=current, end=current + duration)
        current += step

        if strict and slot.end > day_end:
            continue
        # Keep returned slots disjoint when the duration exceeds the step
        if slots and slot.start < slots[-1].end:
            continue
        if any(overlaps(slot, e) for e in events):
            continue
        slots.append(slot)

    return slots
