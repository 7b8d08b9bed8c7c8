"""
Coworking back-office REST API client for workspace and booking data.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pendulum import Date

from ..domain.exceptions import ReservationSourceError
from ..domain.models import Reservation, ResourceCategory, Workspace
from .records import reservation_from_record, workspace_from_record

logger = logging.getLogger(__name__)


class BackofficeClient:
    """
    Client for the back-office workspace and booking endpoints.

    Uses ``GET /api/workspaces`` and the admin listing
    ``GET /api/admin/bookings``. Every response is wrapped in the standard
    envelope ``{"success": bool, "data": ..., "error": str}``.
    """

    PAGE_SIZE = 100
    # Paging needs a unique, stable order
    BOOKINGS_SORT_BY = "b.start_time, b.id"
    BOOKINGS_SORT_ORDER = "asc"

    def __init__(
        self,
        base_url: str,
        access_token: str = "",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: Root URL of the back-office, e.g. ``https://space.example.com``
            access_token: Admin bearer token (needed for the bookings listing)
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    def _get(self, path: str, params: Dict[str, Any], allow_missing: bool = False) -> Any:
        """
        Perform a GET request and unwrap the response envelope.

        Args:
            path: API path below ``base_url``
            params: Query parameters; None values are left out
            allow_missing: Return None instead of failing on 404

        Raises:
            ReservationSourceError: If the request fails or the API reports an error
        """
        url = f"{self.base_url}{path}"
        query = {key: value for key, value in params.items() if value is not None}

        try:
            response = self.session.get(url, headers=self.headers, params=query, timeout=self.timeout)
            if allow_missing and response.status_code == 404:
                return None
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise ReservationSourceError(f"Failed to fetch {path} from back-office: {e}") from e
        except ValueError as e:
            raise ReservationSourceError(f"Invalid JSON returned by {path}: {e}") from e

        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise ReservationSourceError(f"Back-office request {path} failed: {error or 'unknown error'}")

        return payload.get("data")

    def list_workspaces(
        self,
        workspace_id: Optional[str] = None,
        resource_category: Optional[ResourceCategory] = None,
        only_open: bool = True,
    ) -> List[Workspace]:
        if workspace_id is not None:
            workspace = self.get_workspace(workspace_id)
            if workspace is None or (only_open and not workspace.available):
                return []
            if resource_category is not None and workspace.resource_category != resource_category:
                return []
            return [workspace]

        params: Dict[str, Any] = {
            "resource_category": resource_category.value if resource_category else None,
            "available": "true" if only_open else None,
        }
        records = self._get("/api/workspaces", params) or []

        workspaces = [self._parse_workspace(record) for record in records]
        return [
            workspace for workspace in workspaces
            if workspace is not None and (not only_open or workspace.available)
        ]

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        record = self._get(f"/api/workspaces/{workspace_id}", {}, allow_missing=True)
        return self._parse_workspace(record) if record else None

    def list_reservations(
        self,
        date: Date,
        workspace_id: Optional[str] = None,
    ) -> List[Reservation]:
        """
        Fetch all bookings on ``date`` and keep the occupying ones.

        The admin listing is paginated; pages are requested until a short
        page comes back.
        """
        day = date.isoformat()
        reservations: List[Reservation] = []
        page = 1

        while True:
            records = self._get(
                "/api/admin/bookings",
                {
                    "start_date": day,
                    "end_date": day,
                    "workspace_id": workspace_id,
                    "page": page,
                    "limit": self.PAGE_SIZE,
                    "sortBy": self.BOOKINGS_SORT_BY,
                    "sortOrder": self.BOOKINGS_SORT_ORDER,
                },
            ) or []

            for record in records:
                reservation = self._parse_reservation(record)
                if not reservation.status.is_occupying:
                    continue
                if reservation.booking_date != date:
                    continue
                reservations.append(reservation)

            if len(records) < self.PAGE_SIZE:
                break
            page += 1

        logger.debug("Fetched %d occupying reservation(s) for %s", len(reservations), day)
        return sorted(reservations, key=lambda r: r.time_range.start)

    @staticmethod
    def _parse_workspace(record: Dict[str, Any]) -> Optional[Workspace]:
        try:
            return workspace_from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Could not parse workspace record: %s", e)
            return None

    @staticmethod
    def _parse_reservation(record: Dict[str, Any]) -> Reservation:
        # Unreadable bookings fail the whole fetch
        try:
            return reservation_from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            raise ReservationSourceError(f"Could not parse booking record: {e}") from e
