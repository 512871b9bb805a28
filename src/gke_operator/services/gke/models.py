"""Models for GKE cluster observations."""

from __future__ import annotations

from dataclasses import dataclass

from ...models import MasterAuthorizedNetworksConfig


@dataclass(frozen=True)
class ObservedCluster:
    """The provider's view of a cluster, fetched fresh on every pass."""

    name: str
    status: str
    current_master_version: str = ""
    endpoint: str = ""
    cluster_ca_certificate: str = ""
    release_channel: str = "UNSPECIFIED"
    master_authorized_networks_config: MasterAuthorizedNetworksConfig | None = None
    condition_messages: tuple[str, ...] = ()
    location: str = ""

    @property
    def first_condition_message(self) -> str:
        return self.condition_messages[0] if self.condition_messages else ""
