"""
Domain layer - Pure business logic without external dependencies.
"""

from .aggregator import AvailabilityAggregator
from .models import (
    DEFAULT_BUSINESS_HOURS,
    AvailabilityReport,
    AvailabilityResult,
    AvailabilitySlot,
    AvailabilitySummary,
    BookingStatus,
    BusinessHours,
    Reservation,
    ResourceCategory,
    TimeOfDay,
    TimeRange,
    Workspace,
    WorkspaceType,
)
from .slot_calculator import SlotCalculator, is_available, overlaps

__all__ = [
    "AvailabilityAggregator",
    "AvailabilityReport",
    "AvailabilityResult",
    "AvailabilitySlot",
    "AvailabilitySummary",
    "BookingStatus",
    "BusinessHours",
    "DEFAULT_BUSINESS_HOURS",
    "Reservation",
    "ResourceCategory",
    "SlotCalculator",
    "TimeOfDay",
    "TimeRange",
    "Workspace",
    "WorkspaceType",
    "is_available",
    "overlaps",
]
