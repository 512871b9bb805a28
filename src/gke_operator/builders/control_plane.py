"""Builder for control plane desired state."""

from __future__ import annotations

from typing import Any

from ..constants import RELEASE_CHANNELS
from ..models import (
    AddonsConfig,
    CidrBlock,
    ControlPlaneSpec,
    MasterAuthorizedNetworksConfig,
    NetworkSpec,
    NodeManagement,
    NodePoolAutoScaling,
    NodePoolSpec,
    Taint,
)

TAINT_EFFECTS = {"NoSchedule", "PreferNoSchedule", "NoExecute"}


def normalize_version(version: str | None) -> str | None:
    """Strip a leading ``v`` from a Kubernetes version (``v1.27.3`` -> ``1.27.3``)."""
    if not version:
        return None
    return version[1:] if version.startswith("v") else version


def create_control_plane_from_spec(
    spec: dict[str, Any],
    meta: dict[str, Any],
) -> ControlPlaneSpec:
    """Create the desired control plane state from CRD spec.

    Args:
        spec: ManagedControlPlane CRD spec
        meta: Resource metadata

    Returns:
        Desired control plane state with inline node pools

    Raises:
        ValueError: If configuration is invalid
    """
    cluster_name = spec.get("clusterName") or meta.get("name")
    project = spec.get("project")
    location = spec.get("location")
    if not cluster_name or not project or not location:
        raise ValueError("project and location are required")

    network = spec.get("network") or {}
    if not network.get("name"):
        raise ValueError("network.name is required")

    release_channel = spec.get("releaseChannel")
    if release_channel is not None:
        if release_channel.lower() not in RELEASE_CHANNELS:
            raise ValueError(f"Unsupported release channel: {release_channel}")
        release_channel = RELEASE_CHANNELS[release_channel.lower()]

    return ControlPlaneSpec(
        cluster_name=cluster_name,
        project=project,
        location=location,
        network=NetworkSpec(
            name=network["name"],
            subnetwork=network.get("subnetwork"),
            datapath_provider=network.get("datapathProvider"),
        ),
        enable_autopilot=bool(spec.get("enableAutopilot", False)),
        enable_workload_identity=bool(spec.get("enableWorkloadIdentity", False)),
        release_channel=release_channel,
        control_plane_version=normalize_version(spec.get("controlPlaneVersion")),
        master_authorized_networks_config=_authorized_networks_from_spec(
            spec.get("masterAuthorizedNetworksConfig")
        ),
        addons_config=_addons_from_spec(spec.get("addonsConfig")),
        resource_labels=dict(spec.get("resourceLabels") or {}),
        node_pools=tuple(
            create_node_pool_from_spec(pool) for pool in spec.get("nodePools") or []
        ),
    )


def create_node_pool_from_spec(
    spec: dict[str, Any],
    meta: dict[str, Any] | None = None,
) -> NodePoolSpec:
    """Create a node pool from an inline entry or a ManagedNodePool CRD spec.

    The pool name falls back to the resource name when ``nodePoolName`` and
    ``name`` are both absent.

    Raises:
        ValueError: If configuration is invalid
    """
    name = spec.get("nodePoolName") or spec.get("name") or (meta or {}).get("name")
    if not name:
        raise ValueError("node pool name is required")

    replicas = spec.get("replicas", 1)
    if replicas is None or int(replicas) < 0:
        raise ValueError(f"node pool {name}: replicas must be a non-negative integer")

    taints = []
    for taint in spec.get("kubernetesTaints") or []:
        effect = taint.get("effect", "NoSchedule")
        if effect not in TAINT_EFFECTS:
            raise ValueError(f"node pool {name}: unsupported taint effect {effect}")
        taints.append(Taint(key=taint["key"], value=taint.get("value", ""), effect=effect))

    scaling = None
    if spec.get("scaling") is not None:
        scaling = NodePoolAutoScaling(
            min_count=spec["scaling"].get("minCount"),
            max_count=spec["scaling"].get("maxCount"),
        )

    management = None
    if spec.get("management") is not None:
        management = NodeManagement(
            auto_upgrade=spec["management"].get("autoUpgrade"),
            auto_repair=spec["management"].get("autoRepair"),
        )

    return NodePoolSpec(
        name=name,
        replicas=int(replicas),
        machine_type=spec.get("machineType"),
        disk_size_gb=spec.get("diskSizeGb"),
        disk_type=spec.get("diskType"),
        image_type=spec.get("imageType"),
        kubernetes_labels=dict(spec.get("kubernetesLabels") or {}),
        kubernetes_taints=tuple(taints),
        additional_labels=dict(spec.get("additionalLabels") or {}),
        preemptible=spec.get("preemptible"),
        spot=spec.get("spot"),
        scaling=scaling,
        management=management,
        version=normalize_version(spec.get("version")),
    )


def _authorized_networks_from_spec(
    config: dict[str, Any] | None,
) -> MasterAuthorizedNetworksConfig | None:
    # Absent config means the feature is disabled
    if config is None:
        return None

    cidr_blocks = None
    if config.get("cidrBlocks") is not None:
        cidr_blocks = tuple(
            CidrBlock(cidr_block=block["cidrBlock"], display_name=block.get("displayName", ""))
            for block in config["cidrBlocks"]
        )

    return MasterAuthorizedNetworksConfig(
        enabled=True,
        cidr_blocks=cidr_blocks,
        gcp_public_cidrs_access_enabled=config.get("gcpPublicCidrsAccessEnabled"),
    )


def _addons_from_spec(config: dict[str, Any] | None) -> AddonsConfig | None:
    if config is None:
        return None
    return AddonsConfig(
        gcp_filestore_csi_driver_enabled=config.get("gcpFilestoreCsiDriverEnabled"),
        network_policy_enabled=config.get("networkPolicyEnabled"),
        horizontal_pod_autoscaling_enabled=config.get("horizontalPodAutoscalingEnabled"),
        http_load_balancing_enabled=config.get("httpLoadBalancingEnabled"),
    )
