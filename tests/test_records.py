"""
Tests for back-office record parsing.
"""

import pytest

from spacefinder.adapters.records import parse_flag, parse_time, workspace_from_record
from spacefinder.domain.models import TimeOfDay


class TestParseFlag:
    """Tests for parse_flag."""

    @pytest.mark.parametrize("value, expected", [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        ("true", True),
        ("False", False),
        (" TRUE ", True),
    ])
    def test_accepted_values(self, value, expected):
        """Booleans, 0/1 and true/false strings are understood."""
        assert parse_flag(value) is expected

    @pytest.mark.parametrize("value", ["no", "", "0", 2, None, 1.0])
    def test_rejected_values(self, value):
        """Anything else is an error rather than a truthiness guess."""
        with pytest.raises(ValueError, match="Invalid boolean value"):
            parse_flag(value)


class TestWorkspaceFromRecord:
    """Tests for workspace_from_record."""

    def test_string_false_closes_the_workspace(self):
        """The string "false" marks a workspace closed."""
        workspace = workspace_from_record({"id": "pod-1", "name": "Pod", "available": "false"})

        assert workspace.available is False

    def test_available_defaults_to_open(self):
        """A missing flag means open for booking."""
        assert workspace_from_record({"id": "desk-1", "name": "Desk"}).available is True


def test_parse_time_accepts_database_seconds():
    """HH:MM:SS values from the database drop their seconds."""
    assert parse_time("09:30:00") == TimeOfDay.from_hm(9, 30)
    assert parse_time("09:30") == TimeOfDay.from_hm(9, 30)
