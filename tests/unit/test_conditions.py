"""Unit tests for condition utilities."""

from __future__ import annotations

from gke_operator.constants import (
    COND_CONTROL_PLANE_READY,
    COND_READY,
    REASON_CREATING,
    SEVERITY_INFO,
)
from gke_operator.models import StatusRecord
from gke_operator.utils.conditions import (
    get_condition,
    is_condition_true,
    mark_control_plane_not_ready,
    mark_control_plane_ready,
    update_condition,
)


class TestUpdateCondition:
    """Test update_condition."""

    def test_update_condition_new(self) -> None:
        """Test adding a new condition."""
        conditions = []
        result = update_condition(
            conditions, "TestCondition", "True", "TestReason", "Test message"
        )

        assert len(result) == 1
        assert result[0]["type"] == "TestCondition"
        assert result[0]["status"] == "True"
        assert result[0]["reason"] == "TestReason"
        assert result[0]["message"] == "Test message"
        assert "severity" not in result[0]

    def test_update_condition_existing(self) -> None:
        """Test updating an existing condition."""
        conditions = [
            {
                "type": "TestCondition",
                "status": "False",
                "reason": "OldReason",
                "message": "Old message",
                "lastTransitionTime": "2023-01-01T00:00:00Z",
            }
        ]

        result = update_condition(conditions, "TestCondition", "True", "NewReason", "New message")

        assert len(result) == 1
        assert result[0]["status"] == "True"
        assert result[0]["reason"] == "NewReason"
        assert result[0]["lastTransitionTime"] != "2023-01-01T00:00:00Z"

    def test_transition_time_kept_when_status_unchanged(self) -> None:
        conditions = [
            {
                "type": "TestCondition",
                "status": "False",
                "reason": "OldReason",
                "message": "",
                "lastTransitionTime": "2023-01-01T00:00:00Z",
            }
        ]

        update_condition(conditions, "TestCondition", "False", "NewReason", "", severity="Warning")

        assert conditions[0]["lastTransitionTime"] == "2023-01-01T00:00:00Z"
        assert conditions[0]["reason"] == "NewReason"
        assert conditions[0]["severity"] == "Warning"

    def test_other_conditions_untouched(self) -> None:
        conditions = [{"type": "A", "status": "True"}, {"type": "B", "status": "True"}]

        update_condition(conditions, "B", "False", "Reason", "msg")

        assert conditions[0] == {"type": "A", "status": "True"}
        assert conditions[1]["status"] == "False"


class TestConditionLookup:
    """Test condition lookup helpers."""

    def test_get_condition_missing(self) -> None:
        assert get_condition([], COND_READY) is None

    def test_is_condition_true(self) -> None:
        conditions = [{"type": COND_READY, "status": "True"}, {"type": "Other", "status": "False"}]

        assert is_condition_true(conditions, COND_READY) is True
        assert is_condition_true(conditions, "Other") is False
        assert is_condition_true(conditions, "Missing") is False


class TestControlPlaneConditions:
    """Test the paired Ready / ControlPlaneReady helpers."""

    def test_mark_not_ready_sets_both(self) -> None:
        record = StatusRecord()

        mark_control_plane_not_ready(record, REASON_CREATING, SEVERITY_INFO, "starting")

        for condition_type in (COND_READY, COND_CONTROL_PLANE_READY):
            cond = record.get_condition(condition_type)
            assert cond["status"] == "False"
            assert cond["reason"] == REASON_CREATING
            assert cond["severity"] == SEVERITY_INFO
            assert cond["message"] == "starting"

    def test_mark_ready_sets_both(self) -> None:
        record = StatusRecord()
        mark_control_plane_not_ready(record, REASON_CREATING, SEVERITY_INFO)

        mark_control_plane_ready(record)

        assert record.is_true(COND_READY)
        assert record.is_true(COND_CONTROL_PLANE_READY)
        assert "severity" not in record.get_condition(COND_READY)
        assert record.get_condition(COND_READY)["reason"] == ""
