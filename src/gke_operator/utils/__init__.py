"""Utility functions for the GKE Control Plane Operator."""

from .conditions import (
    get_condition,
    is_condition_true,
    mark_control_plane_not_ready,
    mark_control_plane_ready,
    update_condition,
)
from .errors import sanitize_exception
from .events import emit_event
from .secrets import apply_secret, get_secret_value

__all__ = [
    "update_condition",
    "get_condition",
    "is_condition_true",
    "mark_control_plane_not_ready",
    "mark_control_plane_ready",
    "sanitize_exception",
    "emit_event",
    "get_secret_value",
    "apply_secret",
]
