"""
Tests for the back-office API client, using a stubbed requests session.
"""

from typing import Any, Dict, List

import pendulum
import pytest
import requests

from spacefinder.adapters.backoffice_client import BackofficeClient
from spacefinder.domain.exceptions import ReservationSourceError
from spacefinder.domain.models import ResourceCategory


class StubResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StubSession:
    """Returns queued responses keyed by URL path and records every call."""

    def __init__(self, responses: Dict[str, List[StubResponse]]):
        self._responses = responses
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, headers=None, params=None, timeout=None):
        path = url.replace("https://space.example.com", "")
        self.calls.append({"path": path, "headers": headers, "params": params, "timeout": timeout})
        queue = self._responses[path]
        if isinstance(queue[0], Exception):
            raise queue.pop(0)
        return queue.pop(0) if len(queue) > 1 else queue[0]


def _ok(data: Any) -> StubResponse:
    return StubResponse({"success": True, "data": data})


def _booking(booking_id: str, start: str, end: str, status: str = "confirmed", workspace_id: str = "desk-1"):
    return {
        "id": booking_id,
        "workspace_id": workspace_id,
        "booking_date": "2030-01-15",
        "start_time": start,
        "end_time": end,
        "status": status,
    }


def _client(session: StubSession) -> BackofficeClient:
    return BackofficeClient("https://space.example.com/", access_token="secret", timeout=5, session=session)


class TestBackofficeClient:
    """Tests for BackofficeClient."""

    def test_list_workspaces(self):
        """Workspaces are requested with filters and parsed."""
        session = StubSession({
            "/api/workspaces": [_ok([
                {"id": "room-1", "name": "Boardroom", "resource_category": "meeting-room", "type": "boardroom"},
                {"id": "bad"},
            ])],
        })

        workspaces = _client(session).list_workspaces(resource_category=ResourceCategory.MEETING_ROOM)

        assert [w.id for w in workspaces] == ["room-1"]
        call = session.calls[0]
        assert call["params"] == {"resource_category": "meeting-room", "available": "true"}
        assert call["headers"]["Authorization"] == "Bearer secret"
        assert call["timeout"] == 5

    def test_get_workspace_missing(self):
        """A 404 means the workspace does not exist."""
        session = StubSession({"/api/workspaces/nope": [StubResponse({"success": False}, status_code=404)]})

        assert _client(session).get_workspace("nope") is None
        assert _client(session).list_workspaces(workspace_id="nope") == []

    def test_list_reservations_filters_status_and_sorts(self):
        """Only occupying bookings are returned, ordered by start."""
        session = StubSession({
            "/api/admin/bookings": [_ok([
                _booking("b1", "14:00:00", "15:00:00", status="pending"),
                _booking("b2", "09:00:00", "11:00:00"),
                _booking("b3", "11:00:00", "12:00:00", status="cancelled"),
            ])],
        })

        reservations = _client(session).list_reservations(pendulum.date(2030, 1, 15))

        assert [r.id for r in reservations] == ["b2", "b1"]
        params = session.calls[0]["params"]
        assert params["start_date"] == "2030-01-15"
        assert params["end_date"] == "2030-01-15"
        assert params["sortBy"] == "b.start_time, b.id"
        assert params["sortOrder"] == "asc"
        assert "workspace_id" not in params

    def test_list_reservations_paginates(self, monkeypatch):
        """Pages are fetched until a short page is returned."""
        monkeypatch.setattr(BackofficeClient, "PAGE_SIZE", 2)
        session = StubSession({
            "/api/admin/bookings": [
                _ok([_booking("b1", "09:00", "10:00"), _booking("b2", "10:00", "11:00")]),
                _ok([_booking("b3", "12:00", "13:00")]),
            ],
        })

        reservations = _client(session).list_reservations(pendulum.date(2030, 1, 15), workspace_id="desk-1")

        assert [r.id for r in reservations] == ["b1", "b2", "b3"]
        assert [call["params"]["page"] for call in session.calls] == [1, 2]
        assert all(call["params"]["sortBy"] == BackofficeClient.BOOKINGS_SORT_BY for call in session.calls)
        assert session.calls[0]["params"]["workspace_id"] == "desk-1"

    def test_unparseable_booking_fails_the_fetch(self):
        """A malformed booking raises instead of being dropped."""
        session = StubSession({"/api/admin/bookings": [_ok([_booking("b1", "9am", "10:00")])]})

        with pytest.raises(ReservationSourceError, match="Could not parse booking record"):
            _client(session).list_reservations(pendulum.date(2030, 1, 15))

    def test_transport_error(self):
        """Network failures become ReservationSourceError."""
        session = StubSession({"/api/workspaces": [requests.exceptions.ConnectionError("refused")]})

        with pytest.raises(ReservationSourceError, match="Failed to fetch /api/workspaces"):
            _client(session).list_workspaces()

    def test_http_error(self):
        """Non-2xx responses become ReservationSourceError."""
        session = StubSession({"/api/admin/bookings": [StubResponse({"success": False}, status_code=500)]})

        with pytest.raises(ReservationSourceError):
            _client(session).list_reservations(pendulum.date(2030, 1, 15))

    def test_error_envelope(self):
        """An unsuccessful envelope surfaces the API's error message."""
        session = StubSession({"/api/workspaces": [StubResponse({"success": False, "error": "Forbidden"})]})

        with pytest.raises(ReservationSourceError, match="Forbidden"):
            _client(session).list_workspaces()

    def test_invalid_json(self):
        """Unparseable bodies become ReservationSourceError."""
        session = StubSession({"/api/workspaces": [StubResponse(ValueError("no json"))]})

        with pytest.raises(ReservationSourceError, match="Invalid JSON"):
            _client(session).list_workspaces()
