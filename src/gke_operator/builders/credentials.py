"""Builder for Google credentials."""

from __future__ import annotations

import json
from typing import Any

import google.auth
from google.oauth2 import service_account
from kubernetes import client

from ..utils.secrets import get_secret_value

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def load_credentials(
    spec: dict[str, Any],
    meta: dict[str, Any],
    core_api: client.CoreV1Api,
) -> Any:
    """Load Google credentials for a control plane.

    Uses the service account key referenced by ``spec.credentialsRef`` when
    present, otherwise the operator's application default credentials.

    Raises:
        ValueError: If the referenced secret or key is missing or invalid
    """
    credentials_ref = spec.get("credentialsRef")
    if not credentials_ref:
        credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        return credentials

    secret_name = credentials_ref.get("name")
    if not secret_name:
        raise ValueError("credentialsRef.name is required")
    namespace = credentials_ref.get("namespace", meta.get("namespace", "default"))
    key = credentials_ref.get("key", "credentials")

    raw = get_secret_value(core_api, namespace, secret_name, key)
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Secret '{secret_name}' key '{key}' is not a service account key") from e

    return service_account.Credentials.from_service_account_info(info, scopes=[CLOUD_PLATFORM_SCOPE])
