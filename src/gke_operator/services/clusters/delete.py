"""Dispatch on the provider-reported lifecycle status during delete."""

from __future__ import annotations

from ... import metrics
from ...constants import (
    COND_CONTROL_PLANE_DELETING,
    COND_CONTROL_PLANE_READY,
    KIND_CONTROL_PLANE,
    REASON_DELETING,
    REASON_RECONCILIATION_FAILED,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    STATUS_PROVISIONING,
    STATUS_RECONCILING,
    STATUS_STOPPING,
)
from ...logging import ResourceLoggerAdapter
from ...models import ControlPlaneSpec, ReconcileResult, StatusRecord
from ...tracing import trace_span
from ...utils.conditions import mark_control_plane_not_ready
from ...utils.errors import sanitize_exception
from ..container.base import ClusterManager
from ..gke.models import ObservedCluster

# States in which a delete call would be rejected or is already under way
_WAIT_MESSAGES = {
    STATUS_PROVISIONING: "Cluster provisioning in progress",
    STATUS_RECONCILING: "Cluster reconciling in progress",
}


def reconcile_delete(
    desired: ControlPlaneSpec,
    cluster: ObservedCluster,
    status: StatusRecord,
    manager: ClusterManager,
    log: ResourceLoggerAdapter,
) -> ReconcileResult:
    """Delete an existing cluster unless its current state makes that a wait.

    Raises:
        Exception: If the delete call fails
    """
    if cluster.status in _WAIT_MESSAGES:
        log.info(_WAIT_MESSAGES[cluster.status])
        return ReconcileResult.finished()

    if cluster.status == STATUS_STOPPING:
        log.info("Cluster stopping in progress")
        status.mark_false(COND_CONTROL_PLANE_READY, REASON_DELETING, SEVERITY_INFO)
        status.mark_true(COND_CONTROL_PLANE_DELETING)
        return ReconcileResult.finished()

    with trace_span("delete_cluster", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": desired.cluster_name}):
        try:
            manager.delete_cluster(desired.cluster_full_name)
        except Exception as e:
            message = sanitize_exception(e)
            log.error("Error deleting GKE cluster", error=message, error_type=type(e).__name__)
            metrics.cluster_operations_total.labels(operation="delete", result="failed").inc()
            status.mark_false(COND_CONTROL_PLANE_DELETING, REASON_RECONCILIATION_FAILED, SEVERITY_ERROR, message)
            raise

    metrics.cluster_operations_total.labels(operation="delete", result="success").inc()
    log.info("Cluster deleting in progress")
    status.set_not_ready()
    mark_control_plane_not_ready(status, REASON_DELETING, SEVERITY_INFO)
    status.mark_true(COND_CONTROL_PLANE_DELETING)
    return ReconcileResult.finished()
