"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol

from ..constants import COND_CONTROL_PLANE_READY, COND_READY


class ConditionSetter(Protocol):
    """Anything that can record named conditions."""

    def mark_true(self, condition_type: str) -> None:
        """Set a condition to True."""
        ...

    def mark_false(
        self,
        condition_type: str,
        reason: str,
        severity: str,
        message: str = "",
    ) -> None:
        """Set a condition to False with a reason and severity."""
        ...


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    severity: str | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        severity: Severity of a False condition ("Info", "Warning", "Error")

    Returns:
        Updated list of conditions
    """
    now = datetime.now(timezone.utc).isoformat()

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }

    if severity:
        new_condition["severity"] = severity

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # Only update lastTransitionTime if status changed
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition with the given type, if present."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def is_condition_true(conditions: list[dict[str, Any]], condition_type: str) -> bool:
    """Check whether a condition is present with status True."""
    cond = get_condition(conditions, condition_type)
    return cond is not None and cond.get("status") == "True"


def mark_control_plane_not_ready(
    setter: ConditionSetter,
    reason: str,
    severity: str,
    message: str = "",
) -> None:
    """Set both the aggregate Ready and the ControlPlaneReady conditions to False."""
    setter.mark_false(COND_READY, reason, severity, message)
    setter.mark_false(COND_CONTROL_PLANE_READY, reason, severity, message)


def mark_control_plane_ready(setter: ConditionSetter) -> None:
    """Set both the aggregate Ready and the ControlPlaneReady conditions to True."""
    setter.mark_true(COND_READY)
    setter.mark_true(COND_CONTROL_PLANE_READY)
