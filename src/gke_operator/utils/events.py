"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_CLUSTER_CREATING,
    EVENT_REASON_CLUSTER_DEGRADED,
    EVENT_REASON_CLUSTER_DELETING,
    EVENT_REASON_CLUSTER_UPDATING,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
    EVENT_REASON_VALIDATE_SUCCEEDED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_succeeded(body: dict[str, Any]) -> None:
    """Emit validation succeeded event."""
    emit_event(body, EVENT_REASON_VALIDATE_SUCCEEDED, "Validation succeeded")


def emit_validate_failed(body: dict[str, Any], message: str) -> None:
    """Emit validation failed event."""
    emit_event(body, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")


def emit_cluster_creating(body: dict[str, Any], cluster_name: str) -> None:
    emit_event(body, EVENT_REASON_CLUSTER_CREATING, f"GKE cluster {cluster_name} is being created")


def emit_cluster_updating(body: dict[str, Any], cluster_name: str) -> None:
    emit_event(body, EVENT_REASON_CLUSTER_UPDATING, f"GKE cluster {cluster_name} is being updated")


def emit_cluster_deleting(body: dict[str, Any], cluster_name: str) -> None:
    emit_event(body, EVENT_REASON_CLUSTER_DELETING, f"GKE cluster {cluster_name} is being deleted")


def emit_cluster_degraded(body: dict[str, Any], cluster_name: str, message: str) -> None:
    """Emit cluster degraded event."""
    emit_event(
        body,
        EVENT_REASON_CLUSTER_DEGRADED,
        f"GKE cluster {cluster_name} is unhealthy: {message}" if message else f"GKE cluster {cluster_name} is unhealthy",
        type_="Warning",
    )
