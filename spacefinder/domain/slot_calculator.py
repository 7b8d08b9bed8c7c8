"""
Core business logic for overlap detection and slot generation.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from typing import List, Optional, Sequence

from pendulum import Date

from .models import (
    DEFAULT_BUSINESS_HOURS,
    AvailabilitySlot,
    BusinessHours,
    Reservation,
    TimeRange,
    Workspace,
)


def overlaps(candidate: TimeRange, existing: TimeRange) -> bool:
    """
    Check whether two ranges conflict.

    Half-open semantics: a reservation ending at 10:00 does not conflict
    with one starting at 10:00.
    """
    return candidate.overlaps(existing)


def is_available(candidate: TimeRange, reservations: Sequence[Reservation]) -> bool:
    """
    Return True if ``candidate`` conflicts with none of ``reservations``.

    A malformed candidate (start >= end) is never available.
    """
    if not candidate.is_valid():
        return False

    return not any(
        overlaps(candidate, reservation.time_range)
        for reservation in reservations
    )


class SlotCalculator:
    """
    Partitions a workspace's business day into free and occupied slots.

    Algorithm:
    1. Fix the day window to business hours
    2. Sort reservations by start time and clip them to the window
    3. Walk the reservations with a cursor, emitting the free gap before
       each one (if long enough) and the reservation itself
    4. Emit the remainder of the day (if long enough)
    """

    def __init__(self, business_hours: BusinessHours = DEFAULT_BUSINESS_HOURS):
        self.business_hours = business_hours

    def generate_slots(
        self,
        workspace: Workspace,
        reservations: Sequence[Reservation],
        date: Date,
        min_duration_hours: Optional[float] = None
    ) -> List[AvailabilitySlot]:
        """
        Generate the chronological free/occupied slots for one workspace.

        Args:
            workspace: Workspace the reservations belong to
            reservations: Occupying reservations for ``date``
            date: Day being partitioned (reservations are already scoped to it)
            min_duration_hours: Shortest free gap worth reporting. Defaults
                to the workspace's own minimum booking duration.

        Returns:
            Free slots (only those long enough) interleaved with every
            occupied slot, ordered by start time
        """
        if min_duration_hours is None:
            min_duration_hours = workspace.min_duration

        window = self.business_hours.window
        slots: List[AvailabilitySlot] = []

        # Stable sort keeps original order for equal starts
        sorted_reservations = sorted(reservations, key=lambda r: r.time_range.start)

        cursor = window.start

        for reservation in sorted_reservations:
            # Only the part inside business hours counts; bookings entirely outside are skipped
            booked = TimeRange(
                start=max(reservation.time_range.start, window.start),
                end=min(reservation.time_range.end, window.end)
            )
            if not booked.is_valid():
                continue

            if cursor < booked.start:
                self._append_free_slot(
                    slots,
                    workspace,
                    TimeRange(start=cursor, end=booked.start),
                    min_duration_hours
                )

            slots.append(
                AvailabilitySlot(
                    time_range=booked,
                    available=False,
                    workspace_id=workspace.id,
                    workspace_name=workspace.name
                )
            )

            # max() keeps nested or overlapping reservations from moving the cursor back
            cursor = max(cursor, booked.end)

        if cursor < window.end:
            self._append_free_slot(
                slots,
                workspace,
                TimeRange(start=cursor, end=window.end),
                min_duration_hours
            )

        return slots

    def free_slots(
        self,
        workspace: Workspace,
        reservations: Sequence[Reservation],
        date: Date,
        min_duration_hours: Optional[float] = None
    ) -> List[AvailabilitySlot]:
        """Return only the free slots from ``generate_slots``."""
        return [
            slot for slot in self.generate_slots(workspace, reservations, date, min_duration_hours)
            if slot.available
        ]

    def fits_business_hours(self, time_range: TimeRange) -> bool:
        return time_range.is_valid() and self.business_hours.window.contains(time_range)

    @staticmethod
    def _append_free_slot(
        slots: List[AvailabilitySlot],
        workspace: Workspace,
        gap: TimeRange,
        min_duration_hours: float
    ) -> None:
        # Gaps shorter than the threshold are dropped without a marker
        if gap.duration_hours() >= min_duration_hours:
            slots.append(
                AvailabilitySlot(
                    time_range=gap,
                    available=True,
                    workspace_id=workspace.id,
                    workspace_name=workspace.name
                )
            )
