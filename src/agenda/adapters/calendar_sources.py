"""Calendar source adapters - HTTP API (live) and fixed events (stub)."""

import logging
from dataclasses import replace
from datetime import date, datetime, time, tzinfo

import requests

from agenda.core.calendar import Event, filter_events_by_date, sort_events_by_start
from agenda.core.errors import AgendaError

logger = logging.getLogger(__name__)


class CalendarSourceError(AgendaError):
    """Raised when calendar events cannot be fetched."""


def _localize(dt: datetime, tz: tzinfo | None) -> datetime:
    if tz is None:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


class HttpCalendarAdapter:
    """
    Calendar REST API adapter.

    Implements CalendarRepository protocol. Calls
    GET {base_url}/events?date=YYYY-MM-DD and expects a JSON list of events
    (or {"items": [...]}). No business logic - just I/O.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        tz: tzinfo | None = None,
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.tz = tz
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date."""
        try:
            resp = self._session.get(
                f"{self.base_url}/events",
                params={"date": target_date.isoformat()},
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise CalendarSourceError(f"Failed to fetch events for {target_date}: {e}") from e

        if isinstance(data, dict):
            data = data.get("items", [])

        events = []
        for item in data:
            try:
                event = Event.from_api(item, source="http")
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed event {item!r}: {e}")
                continue
            if event.start >= event.end:
                logger.warning(f"Skipping event {event.title!r} with invalid interval")
                continue
            events.append(replace(event, start=_localize(event.start, self.tz), end=_localize(event.end, self.tz)))

        return sort_events_by_start(events)


class StubCalendarAdapter:
    """
    Calendar without a backend.

    Implements CalendarRepository protocol. Serves the given events, or a
    fixed mock working day when none are given.
    """

    def __init__(self, events: list[Event] | None = None, tz: tzinfo | None = None):
        self.events = events
        self.tz = tz

    def _mock_day(self, target_date: date) -> list[Event]:
        def at(hour: int, minute: int = 0) -> datetime:
            return datetime.combine(target_date, time(hour, minute), tzinfo=self.tz)

        return [
            Event("Team standup", at(9, 30), at(10, 0), attendees=("team@example.com",), source="stub"),
            Event("Lunch", at(12, 0), at(13, 0), source="stub"),
            Event("Project review", at(15, 0), at(16, 0), attendees=("lead@example.com",), source="stub"),
        ]

    def fetch_day(self, target_date: date) -> list[Event]:
        if self.events is None:
            return self._mock_day(target_date)
        return sort_events_by_start(filter_events_by_date(self.events, target_date))
