"""Google Kubernetes Engine client."""

from .client import GKEClusterManager, observe_cluster
from .models import ObservedCluster

__all__ = ["GKEClusterManager", "ObservedCluster", "observe_cluster"]
