"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, ReservationSourceProtocol
from .query import AvailabilityQuery

__all__ = ["AvailabilityQuery", "AvailabilityService", "ReservationSourceProtocol"]
