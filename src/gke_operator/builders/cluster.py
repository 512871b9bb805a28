"""Builder for GKE cluster create payloads."""

from __future__ import annotations

from typing import Any

from google.cloud import container_v1

from ..constants import DEFAULT_NUM_ZONES_PER_REGION, RELEASE_CHANNEL_UNSPECIFIED
from ..models import ControlPlaneSpec, MasterAuthorizedNetworksConfig, NodePoolSpec

DATAPATH_PROVIDERS = {
    "LegacyDatapath": container_v1.DatapathProvider.LEGACY_DATAPATH,
    "AdvancedDatapath": container_v1.DatapathProvider.ADVANCED_DATAPATH,
}

TAINT_EFFECTS = {
    "NoSchedule": container_v1.NodeTaint.Effect.NO_SCHEDULE,
    "PreferNoSchedule": container_v1.NodeTaint.Effect.PREFER_NO_SCHEDULE,
    "NoExecute": container_v1.NodeTaint.Effect.NO_EXECUTE,
}


def desired_release_channel(desired: ControlPlaneSpec) -> str:
    """Release channel name to request; UNSPECIFIED when none is declared."""
    return desired.release_channel or RELEASE_CHANNEL_UNSPECIFIED


def desired_master_authorized_networks(
    config: MasterAuthorizedNetworksConfig | None,
) -> MasterAuthorizedNetworksConfig:
    """Authorized networks configuration to send to the provider.

    An undeclared config means the feature is disabled and is expressed in
    its canonical disabled form rather than omitted.
    """
    if config is None:
        return MasterAuthorizedNetworksConfig(
            enabled=False,
            cidr_blocks=(),
            gcp_public_cidrs_access_enabled=False,
        )

    return MasterAuthorizedNetworksConfig(
        enabled=True,
        cidr_blocks=tuple(config.cidr_blocks or ()),
        gcp_public_cidrs_access_enabled=config.gcp_public_cidrs_access_enabled,
    )


def authorized_networks_payload(config: MasterAuthorizedNetworksConfig) -> dict[str, Any]:
    """Render an authorized networks config as a provider message mapping."""
    payload: dict[str, Any] = {
        "enabled": config.enabled,
        "cidr_blocks": [
            {"display_name": block.display_name, "cidr_block": block.cidr_block}
            for block in config.cidr_blocks or ()
        ],
    }
    if config.gcp_public_cidrs_access_enabled is not None:
        payload["gcp_public_cidrs_access_enabled"] = config.gcp_public_cidrs_access_enabled
    return payload


def release_channel_payload(channel: str) -> dict[str, Any]:
    return {"channel": container_v1.ReleaseChannel.Channel[channel]}


def create_cluster_payload(
    desired: ControlPlaneSpec,
    node_pools: list[NodePoolSpec],
) -> dict[str, Any]:
    """Create the cluster payload for a create call.

    Args:
        desired: Desired control plane state
        node_pools: Node pools to create with the cluster (ignored for autopilot)

    Returns:
        Mapping accepted by ``container_v1.Cluster``
    """
    cluster: dict[str, Any] = {
        "name": desired.cluster_name,
        "network": desired.network.name,
        "autopilot": {"enabled": desired.enable_autopilot},
        "release_channel": release_channel_payload(desired_release_channel(desired)),
        "resource_labels": dict(desired.resource_labels),
        "master_authorized_networks_config": authorized_networks_payload(
            desired_master_authorized_networks(desired.master_authorized_networks_config)
        ),
    }

    if desired.network.subnetwork:
        cluster["subnetwork"] = desired.network.subnetwork

    workload_identity = create_workload_identity_config(desired)
    if workload_identity is not None:
        cluster["workload_identity_config"] = workload_identity

    network_config = create_network_config(desired)
    if network_config is not None:
        cluster["network_config"] = network_config

    addons_config = create_addons_config(desired)
    if addons_config is not None:
        cluster["addons_config"] = addons_config

    if desired.control_plane_version:
        cluster["initial_cluster_version"] = desired.control_plane_version

    if not desired.enable_autopilot:
        cluster["node_pools"] = [
            create_node_pool_payload(pool, desired.is_regional) for pool in node_pools
        ]

    return cluster


def create_workload_identity_config(desired: ControlPlaneSpec) -> dict[str, Any] | None:
    # Autopilot clusters enable Workload Identity by default
    if desired.enable_autopilot or not desired.enable_workload_identity:
        return None
    return {"workload_pool": f"{desired.project}.svc.id.goog"}


def create_network_config(desired: ControlPlaneSpec) -> dict[str, Any] | None:
    if desired.network.datapath_provider is None:
        return None
    return {
        "datapath_provider": DATAPATH_PROVIDERS.get(
            desired.network.datapath_provider,
            container_v1.DatapathProvider.DATAPATH_PROVIDER_UNSPECIFIED,
        )
    }


def create_addons_config(desired: ControlPlaneSpec) -> dict[str, Any] | None:
    addons = desired.addons_config
    if addons is None:
        return None

    config: dict[str, Any] = {}
    if addons.gcp_filestore_csi_driver_enabled is not None:
        config["gcp_filestore_csi_driver_config"] = {"enabled": addons.gcp_filestore_csi_driver_enabled}
    if addons.network_policy_enabled is not None:
        config["network_policy_config"] = {"disabled": not addons.network_policy_enabled}
    if addons.horizontal_pod_autoscaling_enabled is not None:
        config["horizontal_pod_autoscaling"] = {"disabled": not addons.horizontal_pod_autoscaling_enabled}
    if addons.http_load_balancing_enabled is not None:
        config["http_load_balancing"] = {"disabled": not addons.http_load_balancing_enabled}
    return config


def create_node_pool_payload(pool: NodePoolSpec, regional: bool) -> dict[str, Any]:
    """Create the node pool mapping for a create call.

    Regional pools are spread over every zone of the region, so the declared
    replica count is divided by the number of zones.
    """
    replicas = pool.replicas
    if regional:
        replicas //= DEFAULT_NUM_ZONES_PER_REGION

    config: dict[str, Any] = {
        "labels": dict(pool.kubernetes_labels),
        "metadata": dict(pool.additional_labels),
        "taints": [
            {"key": taint.key, "value": taint.value, "effect": TAINT_EFFECTS[taint.effect]}
            for taint in pool.kubernetes_taints
        ],
        "preemptible": bool(pool.preemptible),
        "spot": bool(pool.spot),
    }
    if pool.machine_type:
        config["machine_type"] = pool.machine_type
    if pool.disk_size_gb is not None:
        config["disk_size_gb"] = pool.disk_size_gb
    if pool.disk_type:
        config["disk_type"] = pool.disk_type
    if pool.image_type:
        config["image_type"] = pool.image_type

    payload: dict[str, Any] = {
        "name": pool.name,
        "initial_node_count": replicas,
        "config": config,
    }

    if pool.scaling is not None:
        autoscaling: dict[str, Any] = {"enabled": True}
        if pool.scaling.min_count is not None:
            autoscaling["min_node_count"] = pool.scaling.min_count
        if pool.scaling.max_count is not None:
            autoscaling["max_node_count"] = pool.scaling.max_count
        payload["autoscaling"] = autoscaling

    if pool.management is not None:
        payload["management"] = {
            "auto_upgrade": bool(pool.management.auto_upgrade),
            "auto_repair": bool(pool.management.auto_repair),
        }

    if pool.version:
        payload["version"] = pool.version

    return payload
