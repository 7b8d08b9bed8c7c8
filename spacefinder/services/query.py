"""
Validation of incoming availability queries.

Mirrors the query-string contract of the back-office availability endpoint:
every field arrives as text, is checked for format here, and is then checked
against business rules (future date, business hours) once "today" and the
configured opening hours are known.
"""

import re
from typing import Any, Mapping, Optional

import pendulum
from pendulum import Date
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..domain.exceptions import InvalidQueryError
from ..domain.models import DEFAULT_BUSINESS_HOURS, BusinessHours, ResourceCategory, TimeOfDay, TimeRange

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date(value: str) -> Date:
    """
    Parse a zero-padded YYYY-MM-DD calendar date.

    Raises:
        ValueError: If the text is not in that exact format or is not a real date
    """
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValueError("Date must be in YYYY-MM-DD format") from exc


def _format_hour(time_of_day: TimeOfDay) -> str:
    """22:00 -> '10:00 PM'; 07:30 -> '7:30 AM'."""
    hour = time_of_day.hour % 12 or 12
    suffix = "AM" if time_of_day.hour < 12 else "PM"
    return f"{hour}:{time_of_day.minute:02d} {suffix}"


class AvailabilityQuery(BaseModel):
    """Availability query parameters."""

    model_config = ConfigDict(frozen=True)

    date: str
    workspace_id: Optional[str] = None
    resource_category: Optional[ResourceCategory] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_hours: Optional[float] = Field(default=None, gt=0)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        """Ensure the date is a real YYYY-MM-DD calendar date."""
        parse_date(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        TimeOfDay.parse(value)
        return value

    @model_validator(mode="after")
    def validate_range(self) -> "AvailabilityQuery":
        """Start and end come together, and end must follow start."""
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("Both start_time and end_time must be provided together")
        if self.start_time is not None and TimeOfDay.parse(self.end_time) <= TimeOfDay.parse(self.start_time):
            raise ValueError("End time must be after start time")
        return self

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AvailabilityQuery":
        """
        Build a query from loosely-typed parameters (CLI options, query strings).

        Empty values are treated as absent.

        Raises:
            InvalidQueryError: If any parameter is malformed
        """
        cleaned = {key: value for key, value in params.items() if value not in (None, "")}
        try:
            return cls(**cleaned)
        except ValidationError as exc:
            messages = ", ".join(error["msg"].removeprefix("Value error, ") for error in exc.errors())
            raise InvalidQueryError(f"Invalid parameters: {messages}") from exc

    @property
    def day(self) -> Date:
        return parse_date(self.date)

    @property
    def time_range(self) -> Optional[TimeRange]:
        if self.start_time is None or self.end_time is None:
            return None
        return TimeRange.parse(self.start_time, self.end_time)

    def check_business_rules(
        self,
        today: Date,
        business_hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
    ) -> None:
        """
        Apply the rules that depend on the clock and on opening hours.

        Raises:
            InvalidQueryError: If the date is in the past or the requested
                range falls outside business hours
        """
        if self.day < today:
            raise InvalidQueryError("Date must be today or in the future")

        time_range = self.time_range
        if time_range is None:
            return

        if not business_hours.open <= time_range.start < business_hours.close:
            raise InvalidQueryError(
                f"Start time must be between {_format_hour(business_hours.open)} "
                f"and {_format_hour(business_hours.close)}"
            )

        if time_range.end > business_hours.close:
            raise InvalidQueryError(f"End time must be no later than {_format_hour(business_hours.close)}")
