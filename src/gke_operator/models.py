"""Models for the desired and recorded state of a managed control plane."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .utils.conditions import get_condition, is_condition_true, update_condition


@dataclass(frozen=True)
class CidrBlock:
    """A network allowed to reach the control plane endpoint."""

    cidr_block: str
    display_name: str = ""


@dataclass(frozen=True)
class MasterAuthorizedNetworksConfig:
    """Authorized networks configuration.

    ``cidr_blocks`` and ``gcp_public_cidrs_access_enabled`` keep the
    distinction between "unset" (``None``) and an explicit empty/false value.
    """

    enabled: bool
    cidr_blocks: tuple[CidrBlock, ...] | None = None
    gcp_public_cidrs_access_enabled: bool | None = None


@dataclass(frozen=True)
class AddonsConfig:
    """Optional addon toggles; ``None`` leaves the provider default."""

    gcp_filestore_csi_driver_enabled: bool | None = None
    network_policy_enabled: bool | None = None
    horizontal_pod_autoscaling_enabled: bool | None = None
    http_load_balancing_enabled: bool | None = None


@dataclass(frozen=True)
class NetworkSpec:
    """VPC the cluster is attached to."""

    name: str
    subnetwork: str | None = None
    datapath_provider: str | None = None


@dataclass(frozen=True)
class NodePoolAutoScaling:
    min_count: int | None = None
    max_count: int | None = None


@dataclass(frozen=True)
class NodeManagement:
    auto_upgrade: bool | None = None
    auto_repair: bool | None = None


@dataclass(frozen=True)
class Taint:
    key: str
    value: str
    effect: str


@dataclass(frozen=True)
class NodePoolSpec:
    """A node pool declared for the cluster."""

    name: str
    replicas: int
    machine_type: str | None = None
    disk_size_gb: int | None = None
    disk_type: str | None = None
    image_type: str | None = None
    kubernetes_labels: dict[str, str] = field(default_factory=dict)
    kubernetes_taints: tuple[Taint, ...] = ()
    additional_labels: dict[str, str] = field(default_factory=dict)
    preemptible: bool | None = None
    spot: bool | None = None
    scaling: NodePoolAutoScaling | None = None
    management: NodeManagement | None = None
    version: str | None = None


@dataclass(frozen=True)
class ControlPlaneSpec:
    """Desired state of a GKE control plane."""

    cluster_name: str
    project: str
    location: str
    network: NetworkSpec
    enable_autopilot: bool = False
    enable_workload_identity: bool = False
    release_channel: str | None = None
    control_plane_version: str | None = None
    master_authorized_networks_config: MasterAuthorizedNetworksConfig | None = None
    addons_config: AddonsConfig | None = None
    resource_labels: dict[str, str] = field(default_factory=dict)
    node_pools: tuple[NodePoolSpec, ...] = ()

    @property
    def cluster_location(self) -> str:
        """Parent path used for cluster creation."""
        return f"projects/{self.project}/locations/{self.location}"

    @property
    def cluster_full_name(self) -> str:
        """Fully qualified cluster name used by get/update/delete."""
        return f"{self.cluster_location}/clusters/{self.cluster_name}"

    @property
    def is_regional(self) -> bool:
        """A location without a zone suffix (``us-central1``) is a region."""
        return len(self.location.split("-")) == 2


@dataclass
class StatusRecord:
    """Status sub-record of a ManagedControlPlane.

    Implements the condition setter protocol; every write replaces the
    whole condition entry so a reader never sees a half-applied update.
    """

    initialized: bool = False
    ready: bool = False
    current_version: str = ""
    endpoint: str = ""
    conditions: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_status(cls, status: dict[str, Any] | None) -> StatusRecord:
        """Load the record from a persisted status dict."""
        status = status or {}
        return cls(
            initialized=bool(status.get("initialized", False)),
            ready=bool(status.get("ready", False)),
            current_version=status.get("currentVersion", "") or "",
            endpoint=status.get("endpoint", "") or "",
            conditions=[dict(cond) for cond in status.get("conditions", []) or []],
        )

    def to_status(self) -> dict[str, Any]:
        """Render the record for a status patch."""
        return {
            "initialized": self.initialized,
            "ready": self.ready,
            "currentVersion": self.current_version,
            "endpoint": self.endpoint,
            "conditions": self.conditions,
        }

    def mark_true(self, condition_type: str) -> None:
        update_condition(self.conditions, condition_type, "True", "", "")

    def mark_false(
        self,
        condition_type: str,
        reason: str,
        severity: str,
        message: str = "",
    ) -> None:
        update_condition(self.conditions, condition_type, "False", reason, message, severity=severity)

    def get_condition(self, condition_type: str) -> dict[str, Any] | None:
        return get_condition(self.conditions, condition_type)

    def is_true(self, condition_type: str) -> bool:
        return is_condition_true(self.conditions, condition_type)

    def set_not_ready(self) -> None:
        self.initialized = False
        self.ready = False

    def set_ready(self) -> None:
        self.initialized = True
        self.ready = True


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconcile or delete pass.

    Errors are not represented here; they are raised.
    """

    requeue_after: float | None = None
    reason: str = ""

    @property
    def done(self) -> bool:
        return self.requeue_after is None

    @classmethod
    def finished(cls) -> ReconcileResult:
        return cls()

    @classmethod
    def requeue(cls, seconds: float, reason: str = "") -> ReconcileResult:
        return cls(requeue_after=seconds, reason=reason)
