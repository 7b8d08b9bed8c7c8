"""
Combines overlap checks and slot generation into per-workspace results.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from pendulum import Date

from .models import (
    AvailabilityReport,
    AvailabilityResult,
    AvailabilitySlot,
    AvailabilitySummary,
    Reservation,
    TimeRange,
    Workspace,
)
from .slot_calculator import SlotCalculator, is_available

Candidate = Tuple[Workspace, Sequence[Reservation]]


class AvailabilityAggregator:
    """
    Answers an availability query for an already-filtered set of workspaces.

    Each candidate is a workspace paired with its occupying reservations for
    the queried date. Candidates are evaluated independently and in order.
    """

    def __init__(self, slot_calculator: SlotCalculator):
        self.slot_calculator = slot_calculator

    def check_availability(
        self,
        date: Date,
        candidates: Iterable[Candidate],
        time_range: Optional[TimeRange] = None,
        duration_hours: Optional[float] = None,
    ) -> AvailabilityReport:
        """
        Evaluate every candidate and summarise the batch.

        With ``time_range`` each workspace gets a yes/no answer for exactly
        that range. Without it, each workspace gets its free slots for the
        day, filtered by ``duration_hours`` (or the workspace minimum).
        """
        results: List[AvailabilityResult] = []

        for workspace, reservations in candidates:
            if time_range is not None:
                result = self._check_range(workspace, reservations, time_range)
            else:
                result = self._check_day(workspace, reservations, date, duration_hours)
            results.append(result)

        return AvailabilityReport(
            date=date,
            results=results,
            summary=AvailabilitySummary.from_results(results),
        )

    @staticmethod
    def _check_range(
        workspace: Workspace,
        reservations: Sequence[Reservation],
        time_range: TimeRange,
    ) -> AvailabilityResult:
        available = is_available(time_range, reservations)

        if not available:
            return AvailabilityResult(workspace=workspace, is_available=False)

        slot = AvailabilitySlot(
            time_range=time_range,
            available=True,
            workspace_id=workspace.id,
            workspace_name=workspace.name,
        )
        return AvailabilityResult(
            workspace=workspace,
            is_available=True,
            slots=[slot],
            total_available_hours=slot.duration_hours(),
        )

    def _check_day(
        self,
        workspace: Workspace,
        reservations: Sequence[Reservation],
        date: Date,
        duration_hours: Optional[float],
    ) -> AvailabilityResult:
        min_duration = duration_hours if duration_hours is not None else workspace.min_duration

        free = self.slot_calculator.free_slots(workspace, reservations, date, min_duration)

        return AvailabilityResult(
            workspace=workspace,
            is_available=bool(free),
            slots=free,
            total_available_hours=sum(slot.duration_hours() for slot in free),
        )
