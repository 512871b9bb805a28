"""Kubeconfig secrets for reconciled clusters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

import google.auth.transport.requests
import yaml
from kubernetes import client

from ..constants import (
    API_GROUP_VERSION,
    CONTROLLER_NAME,
    GKE_AUTH_PLUGIN,
    KIND_CONTROL_PLANE,
    KUBECONFIG_SECRET_KEY,
    KUBECONFIG_SECRET_SUFFIX,
    LABEL_CLUSTER_NAME,
    LABEL_MANAGED_BY,
    USER_KUBECONFIG_SECRET_SUFFIX,
)
from ..logging import ResourceLoggerAdapter
from ..models import ControlPlaneSpec
from ..utils.secrets import apply_secret
from .gke.models import ObservedCluster


class KubeconfigSync(Protocol):
    """A post-convergence step writing access material for a running cluster."""

    def sync(self, cluster: ObservedCluster, log: ResourceLoggerAdapter) -> None:
        """Write the kubeconfig for the observed cluster."""
        ...


def context_name(desired: ControlPlaneSpec) -> str:
    """Context name in the style of ``gcloud container clusters get-credentials``."""
    return f"gke_{desired.project}_{desired.location}_{desired.cluster_name}"


def build_kubeconfig(
    desired: ControlPlaneSpec,
    cluster: ObservedCluster,
    user_name: str,
    user: dict[str, Any],
) -> dict[str, Any]:
    """Build a single-context kubeconfig document.

    Args:
        desired: Desired control plane state
        cluster: Observed cluster providing endpoint and CA certificate
        user_name: Name of the kubeconfig user entry
        user: User credentials entry

    Returns:
        Kubeconfig as a dict ready for YAML serialization
    """
    name = context_name(desired)
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": name,
                "cluster": {
                    "server": f"https://{cluster.endpoint}",
                    "certificate-authority-data": cluster.cluster_ca_certificate,
                },
            }
        ],
        "contexts": [{"name": name, "context": {"cluster": name, "user": user_name}}],
        "current-context": name,
        "users": [{"name": user_name, "user": user}],
    }


def owner_reference(meta: dict[str, Any]) -> dict[str, Any]:
    return {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_CONTROL_PLANE,
        "name": meta.get("name"),
        "uid": meta.get("uid"),
        "controller": True,
        "blockOwnerDeletion": True,
    }


class _SecretKubeconfigSync(ABC):
    secret_suffix = ""

    def __init__(
        self,
        api: client.CoreV1Api,
        desired: ControlPlaneSpec,
        meta: dict[str, Any],
    ) -> None:
        self.api = api
        self.desired = desired
        self.meta = meta

    @property
    def secret_name(self) -> str:
        return f"{self.meta.get('name')}-{self.secret_suffix}"

    @abstractmethod
    def user(self) -> tuple[str, dict[str, Any]]:
        """Return the kubeconfig user name and entry."""

    def sync(self, cluster: ObservedCluster, log: ResourceLoggerAdapter) -> None:
        user_name, user = self.user()
        kubeconfig = build_kubeconfig(self.desired, cluster, user_name, user)
        apply_secret(
            self.api,
            self.meta.get("namespace", "default"),
            self.secret_name,
            {KUBECONFIG_SECRET_KEY: yaml.safe_dump(kubeconfig, sort_keys=False)},
            owner_references=[owner_reference(self.meta)],
            labels={
                LABEL_CLUSTER_NAME: self.desired.cluster_name,
                LABEL_MANAGED_BY: CONTROLLER_NAME,
            },
        )
        log.info("Kubeconfig secret reconciled", secret=self.secret_name)


class ClusterKubeconfigSync(_SecretKubeconfigSync):
    """Kubeconfig authenticating with a token from the operator's credentials."""

    secret_suffix = KUBECONFIG_SECRET_SUFFIX

    def __init__(
        self,
        api: client.CoreV1Api,
        desired: ControlPlaneSpec,
        meta: dict[str, Any],
        credentials: Any,
    ) -> None:
        super().__init__(api, desired, meta)
        self.credentials = credentials

    def user(self) -> tuple[str, dict[str, Any]]:
        if not self.credentials.valid:
            self.credentials.refresh(google.auth.transport.requests.Request())
        return f"{self.desired.cluster_name}-admin", {"token": self.credentials.token}


class UserKubeconfigSync(_SecretKubeconfigSync):
    """Kubeconfig for people, authenticating through the GKE auth plugin."""

    secret_suffix = USER_KUBECONFIG_SECRET_SUFFIX

    def user(self) -> tuple[str, dict[str, Any]]:
        return context_name(self.desired), {
            "exec": {
                "apiVersion": "client.authentication.k8s.io/v1beta1",
                "command": GKE_AUTH_PLUGIN,
                "installHint": f"Install {GKE_AUTH_PLUGIN} for use with kubectl by following "
                "https://cloud.google.com/blog/products/containers-kubernetes/kubectl-auth-changes-in-gke",
                "provideClusterInfo": True,
                "interactiveMode": "IfAvailable",
            }
        }
