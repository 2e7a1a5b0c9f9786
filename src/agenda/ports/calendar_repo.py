"""Calendar repository interface."""

from datetime import date
from typing import Protocol

from agenda.core.calendar import Event


class CalendarRepository(Protocol):
    """Interface for fetching calendar events from any backend."""

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date."""
        ...
