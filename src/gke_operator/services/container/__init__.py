"""GKE cluster manager interface."""

from .base import ClusterManager

__all__ = ["ClusterManager"]
