"""Lookup of the remote cluster by name."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus

from google.api_core import exceptions

from ... import metrics
from ...constants import KIND_CONTROL_PLANE
from ...logging import ResourceLoggerAdapter
from ...tracing import trace_span
from ...utils.errors import sanitize_exception
from ..container.base import ClusterManager
from ..gke.models import ObservedCluster


class LookupState(str, Enum):
    FOUND = "Found"
    NOT_FOUND = "NotFound"
    ERROR = "Error"


@dataclass(frozen=True)
class DescribeResult:
    """Tagged result of a cluster lookup."""

    state: LookupState
    cluster: ObservedCluster | None = None
    error: Exception | None = None

    @classmethod
    def found(cls, cluster: ObservedCluster) -> DescribeResult:
        return cls(LookupState.FOUND, cluster=cluster)

    @classmethod
    def not_found(cls) -> DescribeResult:
        return cls(LookupState.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> DescribeResult:
        return cls(LookupState.ERROR, error=error)


def is_not_found(error: BaseException) -> bool:
    """Check whether a provider error carries the not-found code."""
    return isinstance(error, exceptions.GoogleAPICallError) and error.code == HTTPStatus.NOT_FOUND


def describe_cluster(
    manager: ClusterManager,
    name: str,
    log: ResourceLoggerAdapter,
) -> DescribeResult:
    """Look up a cluster by its fully qualified name.

    Args:
        manager: Cluster manager used for the lookup
        name: Fully qualified cluster name
        log: Logger bound to the resource being reconciled

    Returns:
        Found with the observed cluster, NotFound, or Error with the cause
    """
    with trace_span("describe_cluster", kind=KIND_CONTROL_PLANE, attributes={"cluster.name": name}):
        try:
            cluster = manager.get_cluster(name)
        except Exception as e:
            if is_not_found(e):
                return DescribeResult.not_found()
            log.error(
                "Error getting GKE cluster",
                cluster=name,
                error=sanitize_exception(e),
                error_type=type(e).__name__,
            )
            return DescribeResult.failed(e)

    metrics.cluster_lifecycle_status_total.labels(status=cluster.status).inc()
    log.debug("GKE cluster found", status=cluster.status)
    return DescribeResult.found(cluster)
