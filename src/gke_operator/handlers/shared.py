"""Shared utilities for handlers."""

from __future__ import annotations

import time

from kubernetes import client, config

from .. import metrics
from ..builders.control_plane import create_node_pool_from_spec
from ..constants import API_GROUP, API_VERSION, LABEL_CLUSTER_NAME, PLURAL_NODE_POOLS
from ..models import NodePoolSpec


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client."""
    load_kube_config()
    return client.CustomObjectsApi()


def get_core_client() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client."""
    load_kube_config()
    return client.CoreV1Api()


def list_node_pools(
    api: client.CustomObjectsApi,
    namespace: str,
    cluster_name: str,
) -> list[NodePoolSpec]:
    """List the ManagedNodePool resources labelled for a cluster.

    Args:
        api: Kubernetes CustomObjectsApi instance
        namespace: Namespace of the control plane
        cluster_name: Value of the cluster-name label

    Returns:
        Desired node pools in listing order

    Raises:
        client.exceptions.ApiException: On API errors
        ValueError: If a node pool spec is invalid
    """
    start_time = time.time()
    try:
        response = api.list_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_NODE_POOLS,
            label_selector=f"{LABEL_CLUSTER_NAME}={cluster_name}",
        )
        metrics.api_call_total.labels(api_type="k8s", operation="list_node_pools", result="success").inc()
    except Exception:
        metrics.api_call_total.labels(api_type="k8s", operation="list_node_pools", result="error").inc()
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation="list_node_pools").observe(duration)

    return [
        create_node_pool_from_spec(item.get("spec", {}), item.get("metadata", {}))
        for item in response.get("items", [])
    ]
