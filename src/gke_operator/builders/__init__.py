"""Builders for desired state, provider payloads and credentials."""

from .cluster import create_cluster_payload, desired_master_authorized_networks
from .control_plane import create_control_plane_from_spec, create_node_pool_from_spec
from .credentials import load_credentials

__all__ = [
    "create_cluster_payload",
    "create_control_plane_from_spec",
    "create_node_pool_from_spec",
    "desired_master_authorized_networks",
    "load_credentials",
]
