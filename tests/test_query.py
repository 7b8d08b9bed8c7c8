"""
Tests for availability query validation.
"""

import pendulum
import pytest

from spacefinder.domain.exceptions import InvalidQueryError
from spacefinder.domain.models import BusinessHours, ResourceCategory, TimeOfDay
from spacefinder.services.query import AvailabilityQuery, parse_date

TODAY = pendulum.date(2030, 1, 10)


class TestQueryFormat:
    """Format checks performed when the query is built."""

    def test_minimal_query(self):
        """Only the date is required."""
        query = AvailabilityQuery.from_params({"date": "2030-01-15"})

        assert query.day == pendulum.date(2030, 1, 15)
        assert query.time_range is None
        assert query.workspace_id is None
        assert query.resource_category is None
        assert query.duration_hours is None

    def test_full_query(self):
        """All optional fields are parsed into typed values."""
        query = AvailabilityQuery.from_params({
            "date": "2030-01-15",
            "workspace_id": "ws-1",
            "resource_category": "meeting-room",
            "start_time": "09:00",
            "end_time": "12:30",
            "duration_hours": "2",
        })

        assert query.resource_category is ResourceCategory.MEETING_ROOM
        assert str(query.time_range) == "09:00 - 12:30"
        assert query.duration_hours == 2.0

    def test_empty_values_are_ignored(self):
        """Blank parameters are treated as absent."""
        query = AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "", "end_time": None})

        assert query.time_range is None

    @pytest.mark.parametrize(
        "date", ["15.01.2030", "2030-1-15", "2030-01-5", "2030-01-15\n", "2030-02-30", "tomorrow"]
    )
    def test_invalid_date(self, date):
        """Dates must be real YYYY-MM-DD dates."""
        with pytest.raises(InvalidQueryError, match="Date must be in YYYY-MM-DD format"):
            AvailabilityQuery.from_params({"date": date})

    def test_parse_date(self):
        """Only zero-padded calendar dates parse."""
        assert parse_date("2030-01-05") == pendulum.date(2030, 1, 5)

        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            parse_date("2030-1-5")

    def test_missing_date(self):
        """The date is required."""
        with pytest.raises(InvalidQueryError):
            AvailabilityQuery.from_params({"workspace_id": "ws-1"})

    def test_invalid_time_format(self):
        """Times must be HH:MM."""
        with pytest.raises(InvalidQueryError, match="HH:MM"):
            AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "9am", "end_time": "10:00"})

    def test_start_and_end_together(self):
        """Start and end must be given together."""
        with pytest.raises(InvalidQueryError, match="Both start_time and end_time must be provided together"):
            AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "09:00"})

    def test_end_after_start(self):
        """End must follow start."""
        with pytest.raises(InvalidQueryError, match="End time must be after start time"):
            AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "12:00", "end_time": "12:00"})

    @pytest.mark.parametrize("duration", [0, -1])
    def test_duration_must_be_positive(self, duration):
        """Duration filter must be positive."""
        with pytest.raises(InvalidQueryError):
            AvailabilityQuery.from_params({"date": "2030-01-15", "duration_hours": duration})

    def test_unknown_category(self):
        """Only desk and meeting-room categories exist."""
        with pytest.raises(InvalidQueryError):
            AvailabilityQuery.from_params({"date": "2030-01-15", "resource_category": "kitchen"})


class TestBusinessRules:
    """Rules that depend on today's date and business hours."""

    def test_today_is_allowed(self):
        """A query for today passes."""
        AvailabilityQuery.from_params({"date": "2030-01-10"}).check_business_rules(today=TODAY)

    def test_past_date_rejected(self):
        """Past dates are rejected."""
        query = AvailabilityQuery.from_params({"date": "2030-01-09"})

        with pytest.raises(InvalidQueryError, match="Date must be today or in the future"):
            query.check_business_rules(today=TODAY)

    @pytest.mark.parametrize("start, end", [("06:30", "08:00"), ("22:00", "23:00")])
    def test_start_outside_business_hours(self, start, end):
        """Start must lie within [07:00, 22:00)."""
        query = AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": start, "end_time": end})

        with pytest.raises(InvalidQueryError, match="Start time must be between 7:00 AM and 10:00 PM"):
            query.check_business_rules(today=TODAY)

    def test_end_after_close(self):
        """End may not pass closing time."""
        query = AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "21:00", "end_time": "22:30"})

        with pytest.raises(InvalidQueryError, match="End time must be no later than 10:00 PM"):
            query.check_business_rules(today=TODAY)

    def test_full_business_day_allowed(self):
        """07:00-22:00 is the largest allowed range."""
        query = AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "07:00", "end_time": "22:00"})

        query.check_business_rules(today=TODAY)

    def test_custom_business_hours_in_messages(self):
        """Messages reflect the configured window."""
        hours = BusinessHours(open=TimeOfDay.from_hm(8, 30), close=TimeOfDay.from_hm(18))
        query = AvailabilityQuery.from_params({"date": "2030-01-15", "start_time": "08:00", "end_time": "09:00"})

        with pytest.raises(InvalidQueryError, match="between 8:30 AM and 6:00 PM"):
            query.check_business_rules(today=TODAY, business_hours=hours)
