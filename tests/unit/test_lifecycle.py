"""Tests for the lifecycle classifier."""

from __future__ import annotations

import pytest

from gke_operator.constants import (
    COND_CONTROL_PLANE_CREATING,
    COND_CONTROL_PLANE_DELETING,
    COND_CONTROL_PLANE_READY,
    COND_CONTROL_PLANE_UPDATING,
    COND_READY,
    DEFAULT_RETRY_SECONDS,
    REASON_CREATING,
    REASON_DELETING,
    REASON_ERROR,
    SEVERITY_ERROR,
    SEVERITY_INFO,
)
from gke_operator.services.clusters.lifecycle import classify_cluster
from gke_operator.utils.errors import UnexpectedClusterStatusError


class TestClassifyCluster:
    """Test the status effect of each observed lifecycle state."""

    def test_provisioning(self, make_cluster, status, log):
        status.set_ready()

        result = classify_cluster(make_cluster(status="PROVISIONING"), status, log)

        assert result.requeue_after == DEFAULT_RETRY_SECONDS
        assert not status.initialized and not status.ready
        for condition_type in (COND_READY, COND_CONTROL_PLANE_READY):
            cond = status.get_condition(condition_type)
            assert cond["status"] == "False"
            assert cond["reason"] == REASON_CREATING
            assert cond["severity"] == SEVERITY_INFO
        assert status.is_true(COND_CONTROL_PLANE_CREATING)

    def test_reconciling(self, make_cluster, status, log):
        result = classify_cluster(make_cluster(status="RECONCILING"), status, log)

        assert result.requeue_after == DEFAULT_RETRY_SECONDS
        assert status.initialized and status.ready
        assert status.is_true(COND_CONTROL_PLANE_UPDATING)

    def test_stopping(self, make_cluster, status, log):
        result = classify_cluster(make_cluster(status="STOPPING"), status, log)

        assert result.requeue_after == DEFAULT_RETRY_SECONDS
        assert not status.ready
        assert status.get_condition(COND_CONTROL_PLANE_READY)["reason"] == REASON_DELETING
        assert status.is_true(COND_CONTROL_PLANE_DELETING)

    @pytest.mark.parametrize("observed", ["ERROR", "DEGRADED"])
    def test_failed_states(self, observed, make_cluster, status, log):
        cluster = make_cluster(status=observed, condition_messages=("quota exceeded", "other"))

        result = classify_cluster(cluster, status, log)

        assert result.done
        assert not status.initialized and not status.ready
        for condition_type in (COND_READY, COND_CONTROL_PLANE_READY):
            cond = status.get_condition(condition_type)
            assert cond["status"] == "False"
            assert cond["reason"] == REASON_ERROR
            assert cond["severity"] == SEVERITY_ERROR
            assert cond["message"] == "quota exceeded"

    def test_failed_without_messages(self, make_cluster, status, log):
        classify_cluster(make_cluster(status="ERROR"), status, log)

        assert status.get_condition(COND_READY)["message"] == ""

    def test_running_proceeds(self, make_cluster, status, log):
        assert classify_cluster(make_cluster(), status, log) is None
        assert status.conditions == []

    @pytest.mark.parametrize("observed", ["STATUS_UNSPECIFIED", "SUSPENDED"])
    def test_unknown_status(self, observed, make_cluster, status, log):
        with pytest.raises(UnexpectedClusterStatusError, match=observed):
            classify_cluster(make_cluster(status=observed), status, log)

        assert status.conditions == []
