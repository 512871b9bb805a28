"""Base GKE cluster manager interface."""

from __future__ import annotations

from typing import Any, Protocol

from ..gke.models import ObservedCluster


class ClusterManager(Protocol):
    """Protocol defining the cluster operations the reconciler relies on.

    Every call is synchronous. ``get_cluster`` raises the provider's
    not-found error for a missing cluster; callers classify it by error code.
    """

    def get_cluster(self, name: str) -> ObservedCluster:
        """Get a cluster by its fully qualified name."""
        ...

    def create_cluster(self, parent: str, cluster: dict[str, Any]) -> None:
        """Create a cluster under the given location."""
        ...

    def update_cluster(self, name: str, update: dict[str, Any]) -> None:
        """Apply a partial update to a cluster."""
        ...

    def delete_cluster(self, name: str) -> None:
        """Delete a cluster."""
        ...
