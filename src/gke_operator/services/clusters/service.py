"""Reconcile and delete passes for a GKE control plane."""

from __future__ import annotations

from typing import Sequence

from ...constants import (
    COND_CONTROL_PLANE_CREATING,
    COND_CONTROL_PLANE_DELETING,
    COND_READY,
    KIND_CONTROL_PLANE,
    REASON_CREATED,
    REASON_DELETED,
    REASON_RECONCILIATION_FAILED,
    SEVERITY_ERROR,
    SEVERITY_INFO,
)
from ...logging import ResourceLoggerAdapter
from ...models import ControlPlaneSpec, ReconcileResult, StatusRecord
from ...tracing import trace_span
from ...utils.conditions import mark_control_plane_ready
from ...utils.errors import sanitize_exception
from ..container.base import ClusterManager
from ..kubeconfig import KubeconfigSync
from .create import NodePoolSource, reconcile_missing_cluster
from .delete import reconcile_delete
from .describe import LookupState, describe_cluster
from .lifecycle import classify_cluster
from .update import update_cluster_if_needed


class ClusterService:
    """Drives one GKE cluster toward its desired state.

    A service instance covers a single pass for a single resource. It reads
    the provider fresh, writes only to ``status``, and keeps nothing between
    passes.
    """

    def __init__(
        self,
        desired: ControlPlaneSpec,
        status: StatusRecord,
        manager: ClusterManager,
        kubeconfig_syncs: Sequence[KubeconfigSync],
        log: ResourceLoggerAdapter,
        list_node_pools: NodePoolSource | None = None,
    ) -> None:
        self.desired = desired
        self.status = status
        self.manager = manager
        self.kubeconfig_syncs = list(kubeconfig_syncs)
        self.log = log.with_values(service="container.clusters")
        self.list_node_pools = list_node_pools or (lambda: desired.node_pools)

    def reconcile(self) -> ReconcileResult:
        """Run one reconcile pass.

        Returns:
            Done, or requeue after the retry interval for wait states

        Raises:
            ClusterPreconditionError: If the desired state cannot be created as declared
            UnexpectedClusterStatusError: If the provider reports an unknown status
            Exception: Provider and kubeconfig failures, unchanged
        """
        log = self.log
        log.info("Reconciling cluster resources")

        with trace_span("reconcile_cluster", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": self.desired.cluster_name}):
            result = describe_cluster(self.manager, self.desired.cluster_full_name, log)

            if result.state is LookupState.ERROR:
                self.status.set_not_ready()
                self.status.mark_false(
                    COND_READY, REASON_RECONCILIATION_FAILED, SEVERITY_ERROR, sanitize_exception(result.error)
                )
                raise result.error

            if result.state is LookupState.NOT_FOUND:
                log.info("Cluster not found, creating")
                return reconcile_missing_cluster(
                    self.desired, self.status, self.manager, self.list_node_pools, log
                )

            cluster = result.cluster
            self.status.current_version = cluster.current_master_version

            outcome = classify_cluster(cluster, self.status, log)
            if outcome is not None:
                return outcome

            if update_cluster_if_needed(self.desired, cluster, self.status, self.manager, log):
                return ReconcileResult.finished()

            for kubeconfig_sync in self.kubeconfig_syncs:
                try:
                    kubeconfig_sync.sync(cluster, log)
                except Exception as e:
                    log.error(
                        "Failed to reconcile kubeconfig",
                        step=type(kubeconfig_sync).__name__,
                        error=sanitize_exception(e),
                    )
                    raise

            self.status.endpoint = cluster.endpoint
            mark_control_plane_ready(self.status)
            self.status.mark_false(COND_CONTROL_PLANE_CREATING, REASON_CREATED, SEVERITY_INFO)
            self.status.set_ready()

        log.info("Cluster reconciled")
        return ReconcileResult.finished()

    def delete(self) -> ReconcileResult:
        """Run one delete pass.

        Returns:
            Done; whether the cluster is gone is recorded in the Deleting condition

        Raises:
            Exception: Lookup or delete call failures
        """
        log = self.log
        log.info("Deleting cluster resources")

        with trace_span("delete_cluster_resources", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": self.desired.cluster_name}):
            result = describe_cluster(self.manager, self.desired.cluster_full_name, log)

            if result.state is LookupState.ERROR:
                raise result.error

            if result.state is LookupState.NOT_FOUND:
                log.info("Cluster already deleted")
                self.status.mark_false(COND_CONTROL_PLANE_DELETING, REASON_DELETED, SEVERITY_INFO)
                return ReconcileResult.finished()

            return reconcile_delete(self.desired, result.cluster, self.status, self.manager, log)
