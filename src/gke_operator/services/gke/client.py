"""GKE cluster manager client implementation."""

from __future__ import annotations

import os
import time
from typing import Any, Callable

from google.cloud import container_v1

from ... import metrics
from ...models import CidrBlock, MasterAuthorizedNetworksConfig
from .models import ObservedCluster


def enum_name(value: Any) -> str:
    """Name of a proto enum value; raw ints come back for values this library does not know."""
    return getattr(value, "name", str(value))


def observe_cluster(cluster: container_v1.Cluster) -> ObservedCluster:
    """Convert a provider cluster message into an ObservedCluster.

    Args:
        cluster: Cluster returned by the GKE API

    Returns:
        Immutable observation of the cluster
    """
    authorized_networks = None
    if "master_authorized_networks_config" in cluster:
        config = cluster.master_authorized_networks_config
        public_access = None
        if "gcp_public_cidrs_access_enabled" in config:
            public_access = config.gcp_public_cidrs_access_enabled
        authorized_networks = MasterAuthorizedNetworksConfig(
            enabled=config.enabled,
            cidr_blocks=tuple(
                CidrBlock(cidr_block=block.cidr_block, display_name=block.display_name)
                for block in config.cidr_blocks
            ),
            gcp_public_cidrs_access_enabled=public_access,
        )

    return ObservedCluster(
        name=cluster.name,
        status=enum_name(cluster.status),
        current_master_version=cluster.current_master_version,
        endpoint=cluster.endpoint,
        cluster_ca_certificate=cluster.master_auth.cluster_ca_certificate,
        release_channel=enum_name(cluster.release_channel.channel),
        master_authorized_networks_config=authorized_networks,
        condition_messages=tuple(cond.message for cond in cluster.conditions),
        location=cluster.location,
    )


class GKEClusterManager:
    """GKE cluster manager backed by the Cluster Manager API."""

    def __init__(
        self,
        credentials: Any = None,
        timeout: float | None = None,
        client: container_v1.ClusterManagerClient | None = None,
    ) -> None:
        """Initialize the GKE cluster manager.

        Args:
            credentials: Google credentials; application default credentials when None
            timeout: Per-call timeout in seconds (GKE_REQUEST_TIMEOUT_SECONDS, default 60)
            client: Pre-built API client
        """
        if timeout is None:
            timeout = float(os.getenv("GKE_REQUEST_TIMEOUT_SECONDS", "60"))
        self.timeout = timeout
        self.client = client or container_v1.ClusterManagerClient(credentials=credentials)

    def __enter__(self) -> GKEClusterManager:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying transport."""
        self.client.transport.close()

    def get_cluster(self, name: str) -> ObservedCluster:
        """Get a cluster by its fully qualified name."""
        request = container_v1.GetClusterRequest(name=name)
        cluster = self._call("get_cluster", self.client.get_cluster, request)
        return observe_cluster(cluster)

    def create_cluster(self, parent: str, cluster: dict[str, Any]) -> None:
        """Create a cluster from a create payload."""
        request = container_v1.CreateClusterRequest(
            parent=parent,
            cluster=container_v1.Cluster(cluster),
        )
        self._call("create_cluster", self.client.create_cluster, request)

    def update_cluster(self, name: str, update: dict[str, Any]) -> None:
        """Apply a partial cluster update."""
        request = container_v1.UpdateClusterRequest(
            name=name,
            update=container_v1.ClusterUpdate(update),
        )
        self._call("update_cluster", self.client.update_cluster, request)

    def delete_cluster(self, name: str) -> None:
        """Delete a cluster."""
        request = container_v1.DeleteClusterRequest(name=name)
        self._call("delete_cluster", self.client.delete_cluster, request)

    def _call(self, operation: str, method: Callable[..., Any], request: Any) -> Any:
        start_time = time.time()
        try:
            response = method(request=request, timeout=self.timeout)
            metrics.api_call_total.labels(api_type="gke", operation=operation, result="success").inc()
            return response
        except Exception:
            metrics.api_call_total.labels(api_type="gke", operation=operation, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="gke", operation=operation).observe(duration)
