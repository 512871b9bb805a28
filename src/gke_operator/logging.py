"""Structured logging configuration for the GKE Control Plane Operator."""

import json
import logging
import sys
from typing import Any

from .constants import CONTROLLER_NAME

# Keyword arguments understood by Logger._log; everything else becomes a JSON field.
_LOGGING_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured resource event."""
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(log_data, default=str))


class ResourceLoggerAdapter(logging.LoggerAdapter):
    """Logger bound to a single resource, emitting one JSON object per record.

    Extra keyword arguments passed to a logging call are merged into the JSON
    payload, so call sites read like ``log.info("Cluster running",
    status="RUNNING")``.
    """

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in _LOGGING_KWARGS}
        log_data = {**self.extra, "message": str(msg), **fields}
        return json.dumps(log_data, default=str), kwargs

    def with_values(self, **fields: Any) -> "ResourceLoggerAdapter":
        """Return a child adapter carrying additional fixed fields."""
        return ResourceLoggerAdapter(self.logger, {**self.extra, **fields})


def get_resource_logger(kind: str, meta: dict[str, Any], **fields: Any) -> ResourceLoggerAdapter:
    """Create a structured logger bound to one resource.

    Args:
        kind: Resource kind
        meta: Kubernetes resource metadata
        **fields: Additional fields attached to every record

    Returns:
        Logger adapter for the resource
    """
    context = {
        "controller": CONTROLLER_NAME,
        "resource": kind,
        "name": meta.get("name", "unknown"),
        "namespace": meta.get("namespace", "default"),
        "uid": meta.get("uid", "unknown"),
    }
    context.update(fields)
    return ResourceLoggerAdapter(logging.getLogger("gke_operator"), context)
