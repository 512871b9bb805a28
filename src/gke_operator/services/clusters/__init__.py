"""Reconciliation engine for GKE control planes."""

from .describe import DescribeResult, LookupState, describe_cluster
from .service import ClusterService
from .update import UpdateRequest, compare_master_authorized_networks, needs_version_update

__all__ = [
    "ClusterService",
    "DescribeResult",
    "LookupState",
    "UpdateRequest",
    "compare_master_authorized_networks",
    "describe_cluster",
    "needs_version_update",
]
