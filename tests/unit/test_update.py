"""Tests for the diff and update planner."""

from __future__ import annotations

import dataclasses

import pytest
from google.api_core import exceptions
from google.cloud import container_v1

from gke_operator.constants import COND_CONTROL_PLANE_UPDATING, REASON_UPDATED, SEVERITY_INFO
from gke_operator.models import CidrBlock, MasterAuthorizedNetworksConfig
from gke_operator.services.clusters.update import (
    UpdateRequest,
    check_diff_and_prepare_update,
    compare_master_authorized_networks,
    needs_version_update,
    update_cluster_if_needed,
)

BLOCK_A = CidrBlock("10.0.0.0/8", "a")
BLOCK_B = CidrBlock("192.168.0.0/16", "b")


class TestNeedsVersionUpdate:
    """Test version prefix semantics."""

    @pytest.mark.parametrize(
        "desired,observed,expected",
        [
            ("1.24", "1.24.14-gke.2700", False),
            ("1.24.14", "1.24.14-gke.2700", False),
            ("1.24.14-gke.2700", "1.24.14-gke.2700", False),
            ("1.25", "1.24.14-gke.2700", True),
            ("1.24.15", "1.24.14-gke.2700", True),
            ("", "1.24.14-gke.2700", False),
            (None, "1.24.14-gke.2700", False),
        ],
    )
    def test_needs_version_update(self, desired, observed, expected):
        assert needs_version_update(desired, observed) is expected


class TestCompareMasterAuthorizedNetworks:
    """Test authorized networks comparison rules."""

    def test_both_none(self):
        assert compare_master_authorized_networks(None, None) is True

    def test_one_none(self):
        config = MasterAuthorizedNetworksConfig(enabled=False)
        assert compare_master_authorized_networks(config, None) is False
        assert compare_master_authorized_networks(None, config) is False

    def test_enabled_differs(self):
        assert not compare_master_authorized_networks(
            MasterAuthorizedNetworksConfig(enabled=True), MasterAuthorizedNetworksConfig(enabled=False)
        )

    def test_public_access_presence_differs(self):
        assert not compare_master_authorized_networks(
            MasterAuthorizedNetworksConfig(enabled=True, gcp_public_cidrs_access_enabled=False),
            MasterAuthorizedNetworksConfig(enabled=True),
        )

    def test_public_access_value_differs(self):
        assert not compare_master_authorized_networks(
            MasterAuthorizedNetworksConfig(enabled=True, gcp_public_cidrs_access_enabled=True),
            MasterAuthorizedNetworksConfig(enabled=True, gcp_public_cidrs_access_enabled=False),
        )

    def test_unset_blocks_equal_empty(self):
        unset = MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=None)
        empty = MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=())

        assert compare_master_authorized_networks(unset, empty) is True
        assert compare_master_authorized_networks(empty, unset) is True

    def test_unset_blocks_differ_from_non_empty(self):
        assert not compare_master_authorized_networks(
            MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=None),
            MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=(BLOCK_A,)),
        )

    def test_blocks_compared_in_order(self):
        a = MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=(BLOCK_A, BLOCK_B))

        assert compare_master_authorized_networks(
            a, MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=(BLOCK_A, BLOCK_B))
        )
        assert not compare_master_authorized_networks(
            a, MasterAuthorizedNetworksConfig(enabled=True, cidr_blocks=(BLOCK_B, BLOCK_A))
        )


class TestUpdateRequest:
    """Test UpdateRequest rendering."""

    def test_empty(self):
        request = UpdateRequest(name="c")

        assert request.changed_fields() == []
        assert request.to_cluster_update() == {}

    def test_all_fields(self):
        request = UpdateRequest(
            name="c",
            desired_release_channel="RAPID",
            desired_master_version="1.28",
            desired_master_authorized_networks_config=MasterAuthorizedNetworksConfig(
                enabled=True, cidr_blocks=(BLOCK_A,)
            ),
        )

        update = container_v1.ClusterUpdate(request.to_cluster_update())

        assert request.changed_fields() == [
            "release_channel",
            "master_version",
            "master_authorized_networks_config",
        ]
        assert update.desired_release_channel.channel == container_v1.ReleaseChannel.Channel.RAPID
        assert update.desired_master_version == "1.28"
        assert update.desired_master_authorized_networks_config.cidr_blocks[0].cidr_block == "10.0.0.0/8"


class TestCheckDiffAndPrepareUpdate:
    """Test the diff between desired and observed configuration."""

    def test_no_diff(self, desired, make_cluster, log):
        need_update, request = check_diff_and_prepare_update(desired, make_cluster(), log)

        assert need_update is False
        assert request is not None
        assert request.changed_fields() == []

    def test_release_channel_only(self, desired, make_cluster, log):
        desired = dataclasses.replace(desired, release_channel="REGULAR")

        need_update, request = check_diff_and_prepare_update(desired, make_cluster(), log)

        assert need_update is True
        assert request.name == desired.cluster_full_name
        assert request.desired_release_channel == "REGULAR"
        assert request.desired_master_version is None
        assert request.desired_master_authorized_networks_config is None

    def test_undeclared_authorized_networks_disable_feature(self, desired, make_cluster, log):
        cluster = make_cluster(
            master_authorized_networks_config=MasterAuthorizedNetworksConfig(
                enabled=True, cidr_blocks=(BLOCK_A,), gcp_public_cidrs_access_enabled=False
            )
        )

        need_update, request = check_diff_and_prepare_update(desired, cluster, log)

        assert need_update is True
        assert request.desired_master_authorized_networks_config == MasterAuthorizedNetworksConfig(
            enabled=False, cidr_blocks=(), gcp_public_cidrs_access_enabled=False
        )

    def test_version_drift(self, desired, make_cluster, log):
        desired = dataclasses.replace(desired, control_plane_version="1.28")

        need_update, request = check_diff_and_prepare_update(desired, make_cluster(), log)

        assert need_update is True
        assert request.changed_fields() == ["master_version"]


class TestUpdateClusterIfNeeded:
    """Test issuing updates."""

    def test_no_update_marks_updated(self, desired, make_cluster, status, manager, log):
        assert update_cluster_if_needed(desired, make_cluster(), status, manager, log) is False

        manager.update_cluster.assert_not_called()
        cond = status.get_condition(COND_CONTROL_PLANE_UPDATING)
        assert cond["status"] == "False"
        assert cond["reason"] == REASON_UPDATED
        assert cond["severity"] == SEVERITY_INFO

    def test_update_issued(self, desired, make_cluster, status, manager, log):
        desired = dataclasses.replace(desired, release_channel="REGULAR")

        assert update_cluster_if_needed(desired, make_cluster(), status, manager, log) is True

        name, update = manager.update_cluster.call_args.args
        assert name == desired.cluster_full_name
        assert list(update) == ["desired_release_channel"]
        assert status.is_true(COND_CONTROL_PLANE_UPDATING)
        assert status.initialized and status.ready

    def test_update_failure_leaves_conditions(self, desired, make_cluster, status, manager, log):
        desired = dataclasses.replace(desired, release_channel="REGULAR")
        manager.update_cluster.side_effect = exceptions.FailedPrecondition("operation in progress")

        with pytest.raises(exceptions.FailedPrecondition):
            update_cluster_if_needed(desired, make_cluster(), status, manager, log)

        assert status.conditions == []
        assert not status.ready
