"""
Application services for workspace availability.

The service coordinates fetching workspaces and reservations via a
reservation source adapter and delegates the actual availability
calculation to the domain-level ``AvailabilityAggregator``. This keeps the
CLI thin and improves testability by allowing the data dependency to be
stubbed via a simple protocol.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Protocol

import pendulum
from pendulum import Date, DateTime

from ..domain.aggregator import AvailabilityAggregator
from ..domain.exceptions import BookingRejectedError, InvalidTimeRangeError, WorkspaceNotFoundError
from ..domain.models import AvailabilityReport, Reservation, ResourceCategory, TimeRange, Workspace
from ..domain.slot_calculator import is_available
from .query import AvailabilityQuery

logger = logging.getLogger(__name__)


class ReservationSourceProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    def list_workspaces(
        self,
        workspace_id: Optional[str] = None,
        resource_category: Optional[ResourceCategory] = None,
        only_open: bool = True,
    ) -> List[Workspace]:
        """Return workspaces matching the filters."""

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        """Return a single workspace, or None if it does not exist."""

    def list_reservations(
        self,
        date: Date,
        workspace_id: Optional[str] = None,
    ) -> List[Reservation]:
        """Return pending and confirmed reservations on ``date``."""


def _format_hours(hours: float) -> str:
    return f"{hours:g}"


class AvailabilityService:
    """
    Orchestrates data retrieval, query validation and availability checks.

    Dependency inversion toward a protocol makes it easy to plug in the
    back-office API client, the JSON fixture source, or a stub in tests.
    """

    def __init__(
        self,
        source: ReservationSourceProtocol,
        aggregator: AvailabilityAggregator,
        timezone: str = "Europe/Berlin",
    ) -> None:
        self._source = source
        self._aggregator = aggregator
        self._timezone = timezone

    @property
    def business_hours(self):
        return self._aggregator.slot_calculator.business_hours

    def list_workspaces(
        self,
        resource_category: Optional[ResourceCategory] = None,
        only_open: bool = True,
    ) -> List[Workspace]:
        return self._source.list_workspaces(resource_category=resource_category, only_open=only_open)

    def check_availability(
        self,
        query: AvailabilityQuery,
        today: Optional[Date] = None,
    ) -> AvailabilityReport:
        """
        Validate the query, load the day's data and compute availability.

        Raises:
            InvalidQueryError: If the query breaks a business rule
            ReservationSourceError: If workspaces or reservations cannot be
                fetched (propagated unchanged)
        """
        today = today or pendulum.today(self._timezone).date()
        query.check_business_rules(today=today, business_hours=self.business_hours)

        workspaces = self._source.list_workspaces(
            workspace_id=query.workspace_id,
            resource_category=query.resource_category,
            only_open=True,
        )
        reservations = self._source.list_reservations(query.day, workspace_id=query.workspace_id)

        by_workspace = self._group_by_workspace(reservations)

        logger.debug(
            "Checking availability for %d workspace(s) on %s against %d reservation(s)",
            len(workspaces),
            query.date,
            len(reservations),
        )

        return self._aggregator.check_availability(
            date=query.day,
            candidates=[(workspace, by_workspace.get(workspace.id, [])) for workspace in workspaces],
            time_range=query.time_range,
            duration_hours=query.duration_hours,
        )

    def ensure_bookable(
        self,
        workspace_id: str,
        date: Date,
        time_range: TimeRange,
        now: Optional[DateTime] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> Workspace:
        """
        Check that a new booking could be inserted for ``workspace_id``.

        Only answers against the snapshot read here; a concurrent insert
        between this check and the caller's write is not detected.

        Args:
            workspace_id: Workspace to book
            date: Booking date
            time_range: Requested range
            now: Current time; defaults to now in the configured timezone
            exclude_booking_id: Existing booking to ignore, so that extending
                a booking does not conflict with itself

        Returns:
            The workspace the booking targets

        Raises:
            InvalidTimeRangeError: If the range is malformed or outside business hours
            WorkspaceNotFoundError: If the workspace does not exist
            BookingRejectedError: If the booking starts in the past, the
                workspace is closed, the duration is outside its limits, or
                the slot is already booked
        """
        now = now or pendulum.now(self._timezone)
        starts_at = pendulum.datetime(
            date.year, date.month, date.day,
            time_range.start.hour, time_range.start.minute,
            tz=self._timezone,
        )
        if starts_at < now:
            raise BookingRejectedError("Cannot book in the past")

        if not time_range.is_valid():
            raise InvalidTimeRangeError("End time must be after start time")

        if not self._aggregator.slot_calculator.fits_business_hours(time_range):
            raise InvalidTimeRangeError(f"Bookings must fall within business hours ({self.business_hours})")

        workspace = self._source.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(f"Workspace not found: {workspace_id}")

        if not workspace.available:
            raise BookingRejectedError("This workspace is not available")

        duration = time_range.duration_hours()
        if duration < workspace.min_duration:
            raise BookingRejectedError(f"Minimum booking duration is {_format_hours(workspace.min_duration)} hours")
        if duration > workspace.max_duration:
            raise BookingRejectedError(f"Maximum booking duration is {_format_hours(workspace.max_duration)} hours")

        reservations = [
            reservation
            for reservation in self._source.list_reservations(date, workspace_id=workspace_id)
            if reservation.workspace_id == workspace_id
            and (exclude_booking_id is None or reservation.id != exclude_booking_id)
        ]

        if not is_available(time_range, reservations):
            logger.info("Rejected booking of %s on %s %s: slot taken", workspace_id, date, time_range)
            raise BookingRejectedError("This time slot is already booked")

        return workspace

    @staticmethod
    def _group_by_workspace(reservations: List[Reservation]) -> Dict[str, List[Reservation]]:
        grouped: Dict[str, List[Reservation]] = defaultdict(list)
        for reservation in reservations:
            grouped[reservation.workspace_id].append(reservation)
        return grouped
