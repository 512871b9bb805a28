"""Shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gke_operator.constants import KIND_CONTROL_PLANE, STATUS_RUNNING
from gke_operator.logging import get_resource_logger
from gke_operator.models import (
    ControlPlaneSpec,
    MasterAuthorizedNetworksConfig,
    NetworkSpec,
    NodePoolSpec,
    StatusRecord,
)
from gke_operator.services.gke.models import ObservedCluster


@pytest.fixture
def log():
    """Logger bound to a test control plane."""
    return get_resource_logger(
        KIND_CONTROL_PLANE,
        {"name": "test-cp", "namespace": "default", "uid": "test-uid"},
    )


@pytest.fixture
def desired() -> ControlPlaneSpec:
    """Zonal, non-autopilot control plane with no optional settings."""
    return ControlPlaneSpec(
        cluster_name="test-cluster",
        project="test-project",
        location="us-central1-a",
        network=NetworkSpec(name="default"),
    )


@pytest.fixture
def status() -> StatusRecord:
    return StatusRecord()


@pytest.fixture
def manager() -> MagicMock:
    """Fake cluster manager."""
    return MagicMock()


@pytest.fixture
def make_cluster():
    """Factory for observed clusters that match the ``desired`` fixture."""

    def _make(**overrides) -> ObservedCluster:
        fields = {
            "name": "test-cluster",
            "status": STATUS_RUNNING,
            "current_master_version": "1.27.3-gke.100",
            "endpoint": "10.0.0.1",
            "cluster_ca_certificate": "Q0EtREFUQQ==",
            "release_channel": "UNSPECIFIED",
            "master_authorized_networks_config": MasterAuthorizedNetworksConfig(
                enabled=False,
                cidr_blocks=(),
                gcp_public_cidrs_access_enabled=False,
            ),
        }
        fields.update(overrides)
        return ObservedCluster(**fields)

    return _make


@pytest.fixture
def make_pool():
    """Factory for node pool specs."""

    def _make(name: str = "pool-1", replicas: int = 1, **overrides) -> NodePoolSpec:
        return NodePoolSpec(name=name, replicas=replicas, **overrides)

    return _make
