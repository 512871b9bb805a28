"""Dispatch on the provider-reported lifecycle status during reconcile."""

from __future__ import annotations

from typing import Callable

from ...constants import (
    COND_CONTROL_PLANE_CREATING,
    COND_CONTROL_PLANE_DELETING,
    COND_CONTROL_PLANE_UPDATING,
    DEFAULT_RETRY_SECONDS,
    REASON_CREATING,
    REASON_DELETING,
    REASON_ERROR,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    STATUS_DEGRADED,
    STATUS_ERROR,
    STATUS_PROVISIONING,
    STATUS_RECONCILING,
    STATUS_RUNNING,
    STATUS_STOPPING,
)
from ...logging import ResourceLoggerAdapter
from ...models import ReconcileResult, StatusRecord
from ...utils.conditions import mark_control_plane_not_ready
from ...utils.errors import UnexpectedClusterStatusError
from ..gke.models import ObservedCluster

# None means "proceed to converge"
LifecycleAction = Callable[[ObservedCluster, StatusRecord, ResourceLoggerAdapter], ReconcileResult | None]


def _provisioning(cluster: ObservedCluster, status: StatusRecord, log: ResourceLoggerAdapter) -> ReconcileResult:
    log.info("Cluster provisioning in progress")
    mark_control_plane_not_ready(status, REASON_CREATING, SEVERITY_INFO)
    status.mark_true(COND_CONTROL_PLANE_CREATING)
    status.set_not_ready()
    return ReconcileResult.requeue(DEFAULT_RETRY_SECONDS, "cluster provisioning in progress")


def _reconciling(cluster: ObservedCluster, status: StatusRecord, log: ResourceLoggerAdapter) -> ReconcileResult:
    log.info("Cluster reconciling in progress")
    status.mark_true(COND_CONTROL_PLANE_UPDATING)
    status.set_ready()
    return ReconcileResult.requeue(DEFAULT_RETRY_SECONDS, "cluster reconciling in progress")


def _stopping(cluster: ObservedCluster, status: StatusRecord, log: ResourceLoggerAdapter) -> ReconcileResult:
    log.info("Cluster stopping in progress")
    mark_control_plane_not_ready(status, REASON_DELETING, SEVERITY_INFO)
    status.mark_true(COND_CONTROL_PLANE_DELETING)
    status.set_not_ready()
    return ReconcileResult.requeue(DEFAULT_RETRY_SECONDS, "cluster stopping in progress")


def _failed(cluster: ObservedCluster, status: StatusRecord, log: ResourceLoggerAdapter) -> ReconcileResult:
    message = cluster.first_condition_message
    log.error("Cluster in error/degraded state", status=cluster.status, provider_message=message)
    mark_control_plane_not_ready(status, REASON_ERROR, SEVERITY_ERROR, message)
    status.set_not_ready()
    # Steady state; the regular resync picks the cluster up again
    return ReconcileResult.finished()


def _running(cluster: ObservedCluster, status: StatusRecord, log: ResourceLoggerAdapter) -> None:
    log.info("Cluster running")
    return None


RECONCILE_ACTIONS: dict[str, LifecycleAction] = {
    STATUS_PROVISIONING: _provisioning,
    STATUS_RECONCILING: _reconciling,
    STATUS_STOPPING: _stopping,
    STATUS_ERROR: _failed,
    STATUS_DEGRADED: _failed,
    STATUS_RUNNING: _running,
}


def classify_cluster(
    cluster: ObservedCluster,
    status: StatusRecord,
    log: ResourceLoggerAdapter,
) -> ReconcileResult | None:
    """Apply the status effect of the observed lifecycle state.

    Args:
        cluster: Observed cluster
        status: Status record to update
        log: Logger bound to the resource being reconciled

    Returns:
        The outcome of the pass for wait and failure states, or None when the
        cluster is running and the pass should go on to converge it

    Raises:
        UnexpectedClusterStatusError: If the status is not one of the known states
    """
    action = RECONCILE_ACTIONS.get(cluster.status)
    if action is None:
        error = UnexpectedClusterStatusError(cluster.status)
        log.error(f"Unhandled cluster status {cluster.status}", error=str(error))
        raise error
    return action(cluster, status, log)
