"""
Reservation source backed by a JSON file, for offline use and demos.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pendulum import Date

from ..domain.exceptions import ReservationSourceError
from ..domain.models import Reservation, ResourceCategory, Workspace
from .records import reservation_from_record, workspace_from_record

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_data.json"


class JsonReservationSource:
    """
    Source that loads workspaces and bookings from a JSON document.

    Expected layout::

        {
            "workspaces": [{"id": "...", "name": "...", "min_duration": 1, ...}],
            "bookings": [{"workspace_id": "...", "booking_date": "2025-10-01",
                          "start_time": "09:00", "end_time": "11:00",
                          "status": "confirmed"}]
        }

    Records that cannot be parsed are skipped with a warning.
    """

    def __init__(self, data_file: Optional[Path] = None, data: Optional[Dict[str, Any]] = None):
        """
        Initialize the source.

        Args:
            data_file: Path to the JSON document. Defaults to the bundled sample data.
            data: Already-loaded document; takes precedence over ``data_file``

        Raises:
            ReservationSourceError: If the file is missing or not valid JSON
        """
        if data is None:
            self.data_file = data_file or SAMPLE_DATA_FILE
            data = self._load(self.data_file)
        else:
            self.data_file = None

        self.workspaces = self._parse_workspaces(data.get("workspaces", []))
        self.reservations = self._parse_reservations(data.get("bookings", []))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JsonReservationSource":
        """Build a source from an in-memory document."""
        return cls(data=data)

    @staticmethod
    def _load(data_file: Path) -> Dict[str, Any]:
        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise ReservationSourceError(f"Data file not found: {data_file}") from exc
        except json.JSONDecodeError as exc:
            raise ReservationSourceError(f"Invalid JSON in {data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise ReservationSourceError(f"Data file {data_file} must contain an object at the root level.")

        return data

    @staticmethod
    def _parse_workspaces(records: List[Dict[str, Any]]) -> List[Workspace]:
        workspaces: List[Workspace] = []
        for record in records:
            try:
                workspaces.append(workspace_from_record(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid workspace record %r: %s", record, exc)
        return workspaces

    @staticmethod
    def _parse_reservations(records: List[Dict[str, Any]]) -> List[Reservation]:
        reservations: List[Reservation] = []
        for record in records:
            try:
                reservations.append(reservation_from_record(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid booking record %r: %s", record, exc)
        return reservations

    def list_workspaces(
        self,
        workspace_id: Optional[str] = None,
        resource_category: Optional[ResourceCategory] = None,
        only_open: bool = True,
    ) -> List[Workspace]:
        return [
            workspace for workspace in self.workspaces
            if (workspace_id is None or workspace.id == workspace_id)
            and (resource_category is None or workspace.resource_category == resource_category)
            and (not only_open or workspace.available)
        ]

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        for workspace in self.workspaces:
            if workspace.id == workspace_id:
                return workspace
        return None

    def list_reservations(
        self,
        date: Date,
        workspace_id: Optional[str] = None,
    ) -> List[Reservation]:
        """Return occupying reservations on ``date``, ordered by start time."""
        matches = [
            reservation for reservation in self.reservations
            if reservation.booking_date == date
            and reservation.status.is_occupying
            and (workspace_id is None or reservation.workspace_id == workspace_id)
        ]
        return sorted(matches, key=lambda r: r.time_range.start)
