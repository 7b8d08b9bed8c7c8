"""
Domain models for workspace availability calculations.

Times are wall-clock values on a single calendar day, held as minutes since
midnight. Dates travel alongside as pendulum ``Date`` objects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from pendulum import Date

from .exceptions import InvalidTimeRangeError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    A wall-clock time with minute granularity.

    Invariant: 0 <= minutes < 1440.
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"Time of day must be within one day, got {self.minutes} minutes")

    @classmethod
    def parse(cls, text: str) -> "TimeOfDay":
        """Parse ``HH:MM`` 24-hour text."""
        match = _TIME_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if not match:
            raise ValueError(f"Time must be in HH:MM format, got {text!r}")

        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise ValueError(f"Time out of range: {text!r}")

        return cls(hours * 60 + minutes)

    @classmethod
    def from_hm(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        return cls(hour * 60 + minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def format(self) -> str:
        """Format as zero-padded ``HH:MM``."""
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class TimeRange:
    """
    A half-open range ``[start, end)`` within one day.

    Ranges built directly are not checked for ordering; the availability
    functions treat ``start >= end`` as "no availability". Use ``parse`` or
    ``between`` at validation boundaries to reject malformed input.
    """
    start: TimeOfDay
    end: TimeOfDay

    @classmethod
    def between(cls, start: TimeOfDay, end: TimeOfDay) -> "TimeRange":
        """Build a range, rejecting zero-length and inverted input."""
        if start >= end:
            raise InvalidTimeRangeError(f"Start time {start} must be before end time {end}")
        return cls(start=start, end=end)

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeRange":
        """Build a validated range from two ``HH:MM`` strings."""
        return cls.between(TimeOfDay.parse(start), TimeOfDay.parse(end))

    def is_valid(self) -> bool:
        return self.start < self.end

    def duration_minutes(self) -> int:
        """Return the duration in minutes (never negative)."""
        return max(self.end.minutes - self.start.minutes, 0)

    def duration_hours(self) -> float:
        return self.duration_minutes() / 60

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ends do not overlap."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if ``other`` lies completely within this range."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass(frozen=True)
class BusinessHours:
    """
    The daily window within which bookings are allowed.

    Applied uniformly to every workspace and every day.
    """
    open: TimeOfDay
    close: TimeOfDay

    def __post_init__(self):
        if self.open >= self.close:
            raise ValueError(f"Business hours must open before they close, got {self.open} - {self.close}")

    @property
    def window(self) -> TimeRange:
        return TimeRange(start=self.open, end=self.close)

    def duration_minutes(self) -> int:
        return self.window.duration_minutes()

    def __str__(self) -> str:
        return str(self.window)


DEFAULT_BUSINESS_HOURS = BusinessHours(
    open=TimeOfDay.from_hm(7),
    close=TimeOfDay.from_hm(22),
)


class ResourceCategory(str, Enum):
    DESK = "desk"
    MEETING_ROOM = "meeting-room"


class WorkspaceType(str, Enum):
    HOT_DESK = "hot-desk"
    FOCUS_ROOM = "focus-room"
    COLLABORATE_ROOM = "collaborate-room"
    BOARDROOM = "boardroom"
    COMMUNICATIONS_POD = "communications-pod"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_occupying(self) -> bool:
        """Only pending and confirmed bookings block a workspace."""
        return self in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(frozen=True)
class Workspace:
    """
    A bookable workspace (desk or meeting room).

    The availability engine reads only ``id``, ``name`` and
    ``min_duration``; the rest is carried for display and booking checks.
    """
    id: str
    name: str
    resource_category: ResourceCategory = ResourceCategory.DESK
    type: WorkspaceType = WorkspaceType.HOT_DESK
    capacity: int = 1
    min_duration: float = 1.0  # hours
    max_duration: float = 8.0  # hours
    available: bool = True  # open for booking


@dataclass(frozen=True)
class Reservation:
    """An existing booking that claims a workspace for a time range on one date."""
    workspace_id: str
    booking_date: Date
    time_range: TimeRange
    status: BookingStatus = BookingStatus.CONFIRMED
    id: str = ""


@dataclass(frozen=True)
class AvailabilitySlot:
    """A free or occupied segment of a workspace's day."""
    time_range: TimeRange
    available: bool
    workspace_id: str
    workspace_name: str

    def duration_hours(self) -> float:
        return self.time_range.duration_hours()

    def to_dict(self) -> dict:
        return {
            "start_time": self.time_range.start.format(),
            "end_time": self.time_range.end.format(),
            "available": self.available,
            "workspace_id": self.workspace_id,
            "workspace_name": self.workspace_name,
        }


@dataclass(frozen=True)
class AvailabilityResult:
    """Availability of one workspace on the queried date."""
    workspace: Workspace
    is_available: bool
    slots: List[AvailabilitySlot] = field(default_factory=list)
    total_available_hours: float = 0.0

    def to_dict(self) -> dict:
        workspace = self.workspace
        return {
            "workspace": {
                "id": workspace.id,
                "name": workspace.name,
                "type": workspace.type.value,
                "resource_category": workspace.resource_category.value,
                "capacity": workspace.capacity,
                "min_duration": workspace.min_duration,
                "max_duration": workspace.max_duration,
            },
            "is_available": self.is_available,
            "available_slots": [slot.to_dict() for slot in self.slots],
            "total_available_hours": self.total_available_hours,
        }


@dataclass(frozen=True)
class AvailabilitySummary:
    total_workspaces: int
    available_workspaces: int
    unavailable_workspaces: int

    @classmethod
    def from_results(cls, results: List[AvailabilityResult]) -> "AvailabilitySummary":
        available = sum(1 for result in results if result.is_available)
        return cls(
            total_workspaces=len(results),
            available_workspaces=available,
            unavailable_workspaces=len(results) - available,
        )


@dataclass(frozen=True)
class AvailabilityReport:
    """Per-workspace results for a date plus the aggregate summary."""
    date: Date
    results: List[AvailabilityResult]
    summary: AvailabilitySummary

    def to_dict(self) -> dict:
        """Shape matches the back-office availability endpoint's ``data`` field."""
        return {
            "date": self.date.isoformat(),
            "workspaces": [result.to_dict() for result in self.results],
            "summary": {
                "total_workspaces": self.summary.total_workspaces,
                "available_workspaces": self.summary.available_workspaces,
                "unavailable_workspaces": self.summary.unavailable_workspaces,
            },
        }
