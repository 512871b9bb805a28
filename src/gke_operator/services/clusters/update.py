"""Diff between desired and observed configuration, and the resulting update."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ... import metrics
from ...builders.cluster import (
    authorized_networks_payload,
    desired_master_authorized_networks,
    desired_release_channel,
    release_channel_payload,
)
from ...constants import COND_CONTROL_PLANE_UPDATING, KIND_CONTROL_PLANE, REASON_UPDATED, SEVERITY_INFO
from ...logging import ResourceLoggerAdapter
from ...models import ControlPlaneSpec, MasterAuthorizedNetworksConfig, StatusRecord
from ...tracing import trace_span
from ...utils.errors import sanitize_exception
from ..container.base import ClusterManager
from ..gke.models import ObservedCluster


@dataclass
class UpdateRequest:
    """Partial cluster update holding only the field groups that changed."""

    name: str
    desired_release_channel: str | None = None
    desired_master_version: str | None = None
    desired_master_authorized_networks_config: MasterAuthorizedNetworksConfig | None = None

    def changed_fields(self) -> list[str]:
        fields = []
        if self.desired_release_channel is not None:
            fields.append("release_channel")
        if self.desired_master_version is not None:
            fields.append("master_version")
        if self.desired_master_authorized_networks_config is not None:
            fields.append("master_authorized_networks_config")
        return fields

    def to_cluster_update(self) -> dict[str, Any]:
        """Render the request as a mapping accepted by ``container_v1.ClusterUpdate``."""
        update: dict[str, Any] = {}
        if self.desired_release_channel is not None:
            update["desired_release_channel"] = release_channel_payload(self.desired_release_channel)
        if self.desired_master_version is not None:
            update["desired_master_version"] = self.desired_master_version
        if self.desired_master_authorized_networks_config is not None:
            update["desired_master_authorized_networks_config"] = authorized_networks_payload(
                self.desired_master_authorized_networks_config
            )
        return update


def needs_version_update(desired_version: str | None, observed_version: str) -> bool:
    """Check whether the control plane version has to change.

    A desired version matches when it is a prefix of the observed one, so
    ``1.24`` and ``1.24.14`` both match ``1.24.14-gke.2700``. An unset
    desired version never asks for an update.
    """
    if not desired_version:
        return False
    if observed_version.startswith(desired_version):
        return False
    return desired_version != observed_version


def _blocks(config: MasterAuthorizedNetworksConfig) -> tuple | None:
    return None if config.cidr_blocks is None else tuple(config.cidr_blocks)


def compare_master_authorized_networks(
    a: MasterAuthorizedNetworksConfig | None,
    b: MasterAuthorizedNetworksConfig | None,
) -> bool:
    """Compare two authorized networks configurations.

    The public access flag must match in presence and value. An unset block
    list equals an empty one.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False

    if a.enabled != b.enabled:
        return False

    a_public = a.gcp_public_cidrs_access_enabled
    b_public = b.gcp_public_cidrs_access_enabled
    if (a_public is None) != (b_public is None):
        return False
    if a_public is not None and a_public != b_public:
        return False

    a_blocks = _blocks(a)
    b_blocks = _blocks(b)
    if (a_blocks is None and b_blocks is not None and len(b_blocks) == 0) or (
        b_blocks is None and a_blocks is not None and len(a_blocks) == 0
    ):
        return True
    return a_blocks == b_blocks


def check_diff_and_prepare_update(
    desired: ControlPlaneSpec,
    cluster: ObservedCluster,
    log: ResourceLoggerAdapter,
) -> tuple[bool, UpdateRequest]:
    """Compare desired and observed configuration.

    Returns:
        Whether an update is needed, and the update request. The request is
        returned even when nothing changed; callers go by the flag.
    """
    need_update = False
    request = UpdateRequest(name=desired.cluster_full_name)

    channel = desired_release_channel(desired)
    if channel != cluster.release_channel:
        log.info("Release channel update required", current=cluster.release_channel, desired=channel)
        metrics.drift_detected_total.labels(kind=KIND_CONTROL_PLANE, resource_type="release_channel").inc()
        need_update = True
        request.desired_release_channel = channel

    if needs_version_update(desired.control_plane_version, cluster.current_master_version):
        log.info(
            "Master version update required",
            current=cluster.current_master_version,
            desired=desired.control_plane_version,
        )
        metrics.drift_detected_total.labels(kind=KIND_CONTROL_PLANE, resource_type="master_version").inc()
        need_update = True
        request.desired_master_version = desired.control_plane_version

    authorized_networks = desired_master_authorized_networks(desired.master_authorized_networks_config)
    if not compare_master_authorized_networks(authorized_networks, cluster.master_authorized_networks_config):
        log.info(
            "Master authorized networks config update required",
            current=cluster.master_authorized_networks_config,
            desired=authorized_networks,
        )
        metrics.drift_detected_total.labels(
            kind=KIND_CONTROL_PLANE, resource_type="master_authorized_networks_config"
        ).inc()
        need_update = True
        request.desired_master_authorized_networks_config = authorized_networks

    log.debug("Update cluster request", need_update=need_update, fields=request.changed_fields())
    return need_update, request


def update_cluster_if_needed(
    desired: ControlPlaneSpec,
    cluster: ObservedCluster,
    status: StatusRecord,
    manager: ClusterManager,
    log: ResourceLoggerAdapter,
) -> bool:
    """Issue an update when the running cluster has drifted.

    Returns:
        True when an update call was issued

    Raises:
        Exception: If the update call fails; conditions are left untouched
    """
    need_update, request = check_diff_and_prepare_update(desired, cluster, log)
    if not need_update:
        status.mark_false(COND_CONTROL_PLANE_UPDATING, REASON_UPDATED, SEVERITY_INFO)
        return False

    log.info("Update required", fields=request.changed_fields())
    with trace_span("update_cluster", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": desired.cluster_name}):
        try:
            manager.update_cluster(request.name, request.to_cluster_update())
        except Exception as e:
            log.error("Error updating GKE cluster", error=sanitize_exception(e), error_type=type(e).__name__)
            metrics.cluster_operations_total.labels(operation="update", result="failed").inc()
            raise

    metrics.cluster_operations_total.labels(operation="update", result="success").inc()
    log.info("Cluster updating in progress")
    status.mark_true(COND_CONTROL_PLANE_UPDATING)
    status.set_ready()
    return True
