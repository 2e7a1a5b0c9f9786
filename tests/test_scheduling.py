"""Tests for multi-day meeting ranking."""

from datetime import date, datetime, time, timedelta

import pytest

from agenda.core.calendar import Event, TimeSlot
from agenda.core.errors import InvalidDuration
from agenda.core.scheduling import (
    SchedulingPreferences,
    rank_days,
    score_day,
    intelligent_schedule,
)


# Fixtures
@pytest.fixture
def today():
    return date(2025, 1, 15)


def make_slots(day: date, hours: list[int], minutes: int = 60) -> list[TimeSlot]:
    starts = [datetime.combine(day, time(h)) for h in hours]
    return [TimeSlot(s, s + timedelta(minutes=minutes)) for s in starts]


def make_event(day: date, start: int, end: int, title: str = "Busy") -> Event:
    return Event(title=title, start=datetime.combine(day, time(start)), end=datetime.combine(day, time(end)))


class TestSchedulingPreferences:
    def test_from_times(self):
        prefs = SchedulingPreferences.from_times(["10:00", " 14:30 "], "high")
        assert prefs.preferred_hours == (10, 14)
        assert prefs.priority == "high"

    def test_from_times_invalid(self):
        with pytest.raises(ValueError):
            SchedulingPreferences.from_times(["noon"])


class TestScoreDay:
    def test_slots_only(self, today):
        assert score_day(make_slots(today, [9, 10, 11]), SchedulingPreferences()) == 30

    def test_preference_window(self, today):
        prefs = SchedulingPreferences(preferred_hours=(10,))
        assert score_day(make_slots(today, [9, 10, 11]), prefs) == 90
        assert score_day(make_slots(today, [13]), prefs) == 10

    def test_each_preferred_hour_counts(self, today):
        prefs = SchedulingPreferences(preferred_hours=(10, 11))
        assert score_day(make_slots(today, [10]), prefs) == 50

    def test_priority_multiplier(self, today):
        slots = make_slots(today, [9, 10, 11])
        assert score_day(slots, SchedulingPreferences((10,), "high")) == pytest.approx(135)
        assert score_day(slots, SchedulingPreferences((10,), "low")) == pytest.approx(72)


class TestRankDays:
    def test_orders_by_score_and_drops_empty_days(self, today):
        day1, day2, day3 = (today + timedelta(days=i) for i in (1, 2, 3))
        availability = {
            day1: make_slots(day1, [9, 10]),
            day2: make_slots(day2, [9, 10, 11, 13, 14]),
        }
        result = rank_days(lambda d: availability.get(d, []), today, horizon_days=3)

        assert [s.date for s in result.suggestions] == [day2, day1]
        assert result.recommendation.date == day2
        assert result.suggestions[0].score == 50
        assert result.suggestions[0].total_slots == 5
        assert len(result.suggestions[0].slots) == 3
        assert day3 not in [s.date for s in result.suggestions]

    def test_ties_keep_chronological_order(self, today):
        result = rank_days(lambda d: make_slots(d, [9, 10]), today, horizon_days=3)
        assert [s.date for s in result.suggestions] == [today + timedelta(days=i) for i in (1, 2, 3)]

    def test_searches_days_after_today(self, today):
        seen = []

        def availability_for(day):
            seen.append(day)
            return []

        result = rank_days(availability_for, today, horizon_days=7)
        assert seen == [today + timedelta(days=i) for i in range(1, 8)]
        assert result.suggestions == []
        assert result.recommendation is None

    def test_invalid_horizon(self, today):
        with pytest.raises(InvalidDuration):
            rank_days(lambda d: [], today, horizon_days=0)


class TestIntelligentSchedule:
    def test_prefers_freer_day(self, today):
        day1 = today + timedelta(days=1)
        day2 = today + timedelta(days=2)
        per_day = {
            day1: [make_event(day1, 9, 10), make_event(day1, 14, 15)],
            day2: [],
        }
        result = intelligent_schedule(per_day, 60, today=today)

        assert [s.date for s in result.suggestions] == [day2, day1]
        assert result.suggestions[0].score == 80
        assert result.suggestions[1].score == 60
        assert [s.start.hour for s in result.suggestions[1].slots] == [10, 11, 12]
        assert result.duration_minutes == 60

    def test_missing_days_have_no_availability(self, today):
        result = intelligent_schedule({}, 60, today=today)
        assert result.suggestions == []

    def test_preferences_applied(self, today):
        day1 = today + timedelta(days=1)
        day2 = today + timedelta(days=2)
        per_day = {
            day1: [make_event(day1, 9, 13)],
            day2: [make_event(day2, 13, 17)],
        }
        prefs = SchedulingPreferences(preferred_hours=(9,))
        result = intelligent_schedule(per_day, 60, prefs, horizon_days=2, today=today)
        assert result.recommendation.date == day2

    @pytest.mark.parametrize("duration", [0, -15])
    def test_invalid_duration(self, today, duration):
        with pytest.raises(InvalidDuration):
            intelligent_schedule({}, duration, today=today)
