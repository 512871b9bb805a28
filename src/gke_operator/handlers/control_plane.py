"""Handler for ManagedControlPlane CRD."""

from __future__ import annotations

import os
import threading
from typing import Any

import kopf

from ..builders.control_plane import create_control_plane_from_spec
from ..builders.credentials import load_credentials
from ..constants import (
    API_GROUP_VERSION,
    COND_CONTROL_PLANE_CREATING,
    COND_CONTROL_PLANE_DELETING,
    COND_CONTROL_PLANE_READY,
    COND_CONTROL_PLANE_UPDATING,
    DEFAULT_RETRY_SECONDS,
    KIND_CONTROL_PLANE,
    REASON_DELETED,
    REASON_ERROR,
)
from ..models import ControlPlaneSpec, NodePoolSpec, ReconcileResult, StatusRecord
from ..services.clusters import ClusterService
from ..services.clusters.create import NodePoolSource
from ..services.gke import GKEClusterManager
from ..services.kubeconfig import ClusterKubeconfigSync, UserKubeconfigSync
from ..tracing import trace_span
from ..utils.errors import ClusterPreconditionError
from ..utils.events import (
    emit_cluster_creating,
    emit_cluster_degraded,
    emit_cluster_deleting,
    emit_cluster_updating,
    emit_validate_succeeded,
)
from .base import BaseHandler
from .shared import get_core_client, get_k8s_client, list_node_pools

RESYNC_INTERVAL_SECONDS = float(os.getenv("RESYNC_INTERVAL_SECONDS", "300"))


def raise_for_result(result: ReconcileResult) -> None:
    """Turn a requeue outcome into a kopf retry.

    Raises:
        kopf.TemporaryError: If the pass asked to be requeued
    """
    if not result.done:
        raise kopf.TemporaryError(result.reason or "requeue requested", delay=result.requeue_after)


class ControlPlaneHandler(BaseHandler):
    """Handler for ManagedControlPlane resources."""

    def __init__(self):
        """Initialize control plane handler."""
        super().__init__(KIND_CONTROL_PLANE)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, meta: dict[str, Any]) -> threading.Lock:
        """Return the lock serializing passes for one resource."""
        uid = meta.get("uid", "unknown")
        with self._locks_guard:
            return self._locks.setdefault(uid, threading.Lock())

    def forget(self, meta: dict[str, Any]) -> None:
        with self._locks_guard:
            self._locks.pop(meta.get("uid", "unknown"), None)

    def desired_state(self, body: dict[str, Any], spec: dict[str, Any], meta: dict[str, Any]) -> ControlPlaneSpec:
        try:
            return create_control_plane_from_spec(spec, meta)
        except ValueError as e:
            self.handle_validation_error(body, str(e))

    def node_pool_source(self, desired: ControlPlaneSpec, meta: dict[str, Any]) -> NodePoolSource:
        """Build the pool source: inline pools followed by labelled ManagedNodePools."""

        def list_pools() -> list[NodePoolSpec]:
            pools = list(desired.node_pools)
            pools.extend(list_node_pools(get_k8s_client(), meta.get("namespace", "default"), desired.cluster_name))
            return pools

        return list_pools

    def publish_status(
        self,
        body: dict[str, Any],
        patch: kopf.Patch,
        desired: ControlPlaneSpec,
        before: StatusRecord,
        after: StatusRecord,
    ) -> None:
        """Write the status record and emit events for conditions that just turned on."""
        self.update_resource_status(patch, body.get("metadata", {}), after.ready, after.to_status())

        def turned_true(condition_type: str) -> bool:
            return after.is_true(condition_type) and not before.is_true(condition_type)

        if turned_true(COND_CONTROL_PLANE_CREATING):
            emit_cluster_creating(body, desired.cluster_name)
        if turned_true(COND_CONTROL_PLANE_UPDATING):
            emit_cluster_updating(body, desired.cluster_name)
        if turned_true(COND_CONTROL_PLANE_DELETING):
            emit_cluster_deleting(body, desired.cluster_name)

        degraded = after.get_condition(COND_CONTROL_PLANE_READY)
        previous = before.get_condition(COND_CONTROL_PLANE_READY)
        if degraded and degraded.get("reason") == REASON_ERROR and (
            previous is None or previous.get("reason") != REASON_ERROR
        ):
            emit_cluster_degraded(body, desired.cluster_name, degraded.get("message", ""))

    def reconcile(
        self,
        body: dict[str, Any],
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Reconcile ManagedControlPlane resource.

        Raises:
            kopf.TemporaryError: When the pass asks to be requeued
            kopf.PermanentError: When the cluster can never be created as declared
        """
        name = meta.get("name", "unknown")

        with trace_span("reconcile_control_plane", kind=KIND_CONTROL_PLANE, attributes={"controlplane.name": name}):
            desired = self.desired_state(body, spec, meta)
            emit_validate_succeeded(body)

            log = self.resource_logger(meta, cluster=desired.cluster_name)
            before = StatusRecord.from_status(status)
            record = StatusRecord.from_status(status)

            core_api = get_core_client()
            credentials = load_credentials(spec, meta, core_api)
            syncs = [
                ClusterKubeconfigSync(core_api, desired, meta, credentials),
                UserKubeconfigSync(core_api, desired, meta),
            ]

            try:
                with GKEClusterManager(credentials=credentials) as manager:
                    service = ClusterService(
                        desired,
                        record,
                        manager,
                        syncs,
                        log,
                        list_node_pools=self.node_pool_source(desired, meta),
                    )
                    result = service.reconcile()
            except ClusterPreconditionError as e:
                raise kopf.PermanentError(str(e)) from e
            finally:
                self.publish_status(body, patch, desired, before, record)

            raise_for_result(result)

    def delete(
        self,
        body: dict[str, Any],
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Handle ManagedControlPlane resource deletion.

        The finalizer is released only once the cluster is reported gone.

        Raises:
            kopf.TemporaryError: While the cluster still exists
        """
        self.log_info(meta, "Control plane is being deleted", event="deletion", reason="Deletion")

        try:
            desired = create_control_plane_from_spec(spec, meta)
        except ValueError as e:
            # An invalid spec never reached the provider
            self.log_warning(meta, f"Releasing control plane with invalid spec: {e}", reason="ValidationFailed")
            self.remove_finalizer(meta, patch)
            return

        with trace_span("delete_control_plane", kind=KIND_CONTROL_PLANE, attributes={"controlplane.name": desired.cluster_name}):
            log = self.resource_logger(meta, cluster=desired.cluster_name)
            before = StatusRecord.from_status(status)
            record = StatusRecord.from_status(status)
            credentials = load_credentials(spec, meta, get_core_client())

            try:
                with GKEClusterManager(credentials=credentials) as manager:
                    ClusterService(desired, record, manager, [], log).delete()
            finally:
                self.publish_status(body, patch, desired, before, record)

            deleting = record.get_condition(COND_CONTROL_PLANE_DELETING)
            if deleting is None or deleting.get("reason") != REASON_DELETED:
                raise kopf.TemporaryError("cluster deletion in progress", delay=DEFAULT_RETRY_SECONDS)

            self.log_info(meta, "GKE cluster deleted", event="deletion", reason="Deleted")
            self.remove_finalizer(meta, patch)


# Global handler instance
_handler = ControlPlaneHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_CONTROL_PLANE)
@kopf.on.update(API_GROUP_VERSION, KIND_CONTROL_PLANE)
@kopf.on.resume(API_GROUP_VERSION, KIND_CONTROL_PLANE)
def handle_control_plane(
    body: dict[str, Any],
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ManagedControlPlane resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    with _handler.lock_for(meta):
        _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, spec, meta, status, patch))


@kopf.timer(API_GROUP_VERSION, KIND_CONTROL_PLANE, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_control_plane(
    body: dict[str, Any],
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Re-evaluate a ManagedControlPlane periodically."""
    if meta.get("deletionTimestamp"):
        return
    lock = _handler.lock_for(meta)
    # A change handler is already working on this resource
    if not lock.acquire(blocking=False):
        return
    try:
        _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, spec, meta, status, patch))
    finally:
        lock.release()


@kopf.on.delete(API_GROUP_VERSION, KIND_CONTROL_PLANE)
def handle_control_plane_delete(
    body: dict[str, Any],
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ManagedControlPlane resource deletion."""
    with _handler.lock_for(meta):
        _handler.delete(body, spec, meta, status, patch)
    _handler.forget(meta)
