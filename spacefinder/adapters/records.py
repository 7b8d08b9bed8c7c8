"""
Conversion of back-office workspace and booking records into domain models.

Both the JSON fixture source and the HTTP client receive rows shaped like the
back-office database tables, so the parsing lives here once.
"""

from typing import Any, Dict

import pendulum

from ..domain.models import (
    BookingStatus,
    Reservation,
    ResourceCategory,
    TimeOfDay,
    TimeRange,
    Workspace,
    WorkspaceType,
)


def parse_time(value: str) -> TimeOfDay:
    """
    Parse a booking time.

    The database returns ``HH:MM:SS``; the API and fixtures use ``HH:MM``.
    """
    if isinstance(value, str) and len(value) == 8 and value[5] == ":":
        value = value[:5]
    return TimeOfDay.parse(value)


def parse_flag(value: Any) -> bool:
    """
    Parse a boolean column.

    Accepts real booleans, 0/1 and the strings "true"/"false" (any case).

    Raises:
        ValueError: For anything else
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"Invalid boolean value: {value!r}")


def workspace_from_record(record: Dict[str, Any]) -> Workspace:
    """
    Build a Workspace from a record.

    Raises:
        KeyError: If ``id`` or ``name`` is missing
        ValueError: If an enum or numeric field is invalid
    """
    return Workspace(
        id=str(record["id"]),
        name=record["name"],
        resource_category=ResourceCategory(record.get("resource_category", ResourceCategory.DESK.value)),
        type=WorkspaceType(record.get("type", WorkspaceType.HOT_DESK.value)),
        capacity=int(record.get("capacity", 1)),
        min_duration=float(record.get("min_duration", 1)),
        max_duration=float(record.get("max_duration", 8)),
        available=parse_flag(record.get("available", True)),
    )


def reservation_from_record(record: Dict[str, Any]) -> Reservation:
    """
    Build a Reservation from a booking record.

    Raises:
        KeyError: If a required field is missing
        ValueError: If the date, times or status are invalid
    """
    # Timestamps such as "2025-10-01T00:00:00Z" are cut down to the date part
    booking_date = pendulum.from_format(str(record["booking_date"])[:10], "YYYY-MM-DD").date()

    return Reservation(
        id=str(record.get("id", "")),
        workspace_id=str(record["workspace_id"]),
        booking_date=booking_date,
        time_range=TimeRange(
            start=parse_time(record["start_time"]),
            end=parse_time(record["end_time"]),
        ),
        status=BookingStatus(record.get("status", BookingStatus.CONFIRMED.value)),
    )
