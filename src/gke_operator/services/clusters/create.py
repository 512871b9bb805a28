"""Creation of a cluster that does not exist yet."""

from __future__ import annotations

from typing import Callable, Iterable

from ... import metrics
from ...builders.cluster import create_cluster_payload
from ...constants import (
    COND_CONTROL_PLANE_CREATING,
    DEFAULT_NUM_ZONES_PER_REGION,
    DEFAULT_RETRY_SECONDS,
    KIND_CONTROL_PLANE,
    REASON_AUTOPILOT_NODE_POOLS,
    REASON_CREATING,
    REASON_RECONCILIATION_FAILED,
    REASON_REQUIRES_NODE_POOL,
    SEVERITY_ERROR,
    SEVERITY_INFO,
)
from ...logging import ResourceLoggerAdapter
from ...models import ControlPlaneSpec, NodePoolSpec, ReconcileResult, StatusRecord
from ...tracing import trace_span
from ...utils.conditions import mark_control_plane_not_ready
from ...utils.errors import AutopilotNodePoolsNotAllowedError, NodePoolPreflightError, sanitize_exception
from ..container.base import ClusterManager

NodePoolSource = Callable[[], Iterable[NodePoolSpec]]


def _mark_creation_blocked(status: StatusRecord, reason: str, severity: str, message: str = "") -> None:
    mark_control_plane_not_ready(status, reason, severity, message)
    status.mark_false(COND_CONTROL_PLANE_CREATING, reason, severity, message)


def preflight_node_pools(node_pools: list[NodePoolSpec], regional: bool) -> None:
    """Check declared node pools before they are sent with a create call.

    Raises:
        NodePoolPreflightError: If a pool can never be created as declared
    """
    seen: set[str] = set()
    for pool in node_pools:
        if pool.name in seen:
            raise NodePoolPreflightError(f"node pool {pool.name} is declared more than once")
        seen.add(pool.name)

        if regional and pool.replicas % DEFAULT_NUM_ZONES_PER_REGION != 0:
            raise NodePoolPreflightError(
                f"node pool {pool.name}: replicas ({pool.replicas}) must be a multiple of "
                f"{DEFAULT_NUM_ZONES_PER_REGION} for a regional cluster"
            )

        scaling = pool.scaling
        if (
            scaling is not None
            and scaling.min_count is not None
            and scaling.max_count is not None
            and scaling.min_count > scaling.max_count
        ):
            raise NodePoolPreflightError(
                f"node pool {pool.name}: scaling.minCount must not exceed scaling.maxCount"
            )


def create_cluster(
    desired: ControlPlaneSpec,
    node_pools: list[NodePoolSpec],
    manager: ClusterManager,
    log: ResourceLoggerAdapter,
) -> None:
    """Issue the create call for the desired cluster."""
    if not desired.enable_autopilot:
        log.debug("Running pre-flight checks on node pools before cluster creation")
        preflight_node_pools(node_pools, desired.is_regional)

    payload = create_cluster_payload(desired, node_pools)

    log.debug("Creating GKE cluster")
    with trace_span("create_cluster", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": desired.cluster_name}):
        manager.create_cluster(desired.cluster_location, payload)


def reconcile_missing_cluster(
    desired: ControlPlaneSpec,
    status: StatusRecord,
    manager: ClusterManager,
    list_node_pools: NodePoolSource,
    log: ResourceLoggerAdapter,
) -> ReconcileResult:
    """Create the cluster, or report why it cannot be created yet.

    Args:
        desired: Desired control plane state
        status: Status record to update
        manager: Cluster manager
        list_node_pools: Returns the node pools declared for the cluster
        log: Logger bound to the resource being reconciled

    Returns:
        Requeue after the retry interval, both when creation was started and
        when a non-autopilot cluster has no node pools yet

    Raises:
        AutopilotNodePoolsNotAllowedError: If node pools are declared for an autopilot cluster
        Exception: Any failure listing node pools or creating the cluster
    """
    status.set_not_ready()

    try:
        node_pools = list(list_node_pools())
    except Exception as e:
        _mark_creation_blocked(status, REASON_RECONCILIATION_FAILED, SEVERITY_ERROR, sanitize_exception(e))
        raise

    if desired.enable_autopilot:
        if node_pools:
            error = AutopilotNodePoolsNotAllowedError(len(node_pools))
            log.error(str(error), node_pools=len(node_pools))
            _mark_creation_blocked(status, REASON_AUTOPILOT_NODE_POOLS, SEVERITY_ERROR, str(error))
            raise error
    elif not node_pools:
        log.info("At least 1 node pool is required to create GKE cluster with autopilot disabled")
        _mark_creation_blocked(status, REASON_REQUIRES_NODE_POOL, SEVERITY_INFO)
        return ReconcileResult.requeue(DEFAULT_RETRY_SECONDS, "waiting for node pools")

    try:
        create_cluster(desired, node_pools, manager, log)
    except Exception as e:
        message = sanitize_exception(e)
        log.error("Failed creating cluster", error=message, error_type=type(e).__name__)
        metrics.cluster_operations_total.labels(operation="create", result="failed").inc()
        _mark_creation_blocked(status, REASON_RECONCILIATION_FAILED, SEVERITY_ERROR, message)
        raise

    metrics.cluster_operations_total.labels(operation="create", result="success").inc()
    log.info("Cluster created provisioning in progress", node_pools=len(node_pools))
    mark_control_plane_not_ready(status, REASON_CREATING, SEVERITY_INFO)
    status.mark_true(COND_CONTROL_PLANE_CREATING)
    return ReconcileResult.requeue(DEFAULT_RETRY_SECONDS, "cluster creation in progress")
