"""Tests for structured logging."""

from __future__ import annotations

import json
import logging

from gke_operator.constants import CONTROLLER_NAME, KIND_CONTROL_PLANE
from gke_operator.logging import get_resource_logger, log_resource_event


def _payloads(caplog) -> list[dict]:
    return [json.loads(record.getMessage()) for record in caplog.records]


class TestResourceLogger:
    """Test the per-resource logger adapter."""

    def test_fields_become_json(self, caplog):
        log = get_resource_logger(KIND_CONTROL_PLANE, {"name": "cp", "namespace": "ns", "uid": "u1"})

        with caplog.at_level(logging.INFO, logger="gke_operator"):
            log.info("Cluster running", status="RUNNING")

        (payload,) = _payloads(caplog)
        assert payload == {
            "controller": CONTROLLER_NAME,
            "resource": KIND_CONTROL_PLANE,
            "name": "cp",
            "namespace": "ns",
            "uid": "u1",
            "message": "Cluster running",
            "status": "RUNNING",
        }

    def test_with_values_adds_fields(self, caplog):
        log = get_resource_logger(KIND_CONTROL_PLANE, {"name": "cp"}).with_values(service="container.clusters")

        with caplog.at_level(logging.INFO, logger="gke_operator"):
            log.warning("something")

        (payload,) = _payloads(caplog)
        assert payload["service"] == "container.clusters"
        assert payload["namespace"] == "default"
        assert caplog.records[0].levelno == logging.WARNING

    def test_debug_suppressed_at_info(self, caplog):
        log = get_resource_logger(KIND_CONTROL_PLANE, {"name": "cp"})

        with caplog.at_level(logging.INFO, logger="gke_operator"):
            log.debug("hidden", detail="x")

        assert caplog.records == []


class TestLogResourceEvent:
    """Test log_resource_event."""

    def test_log_resource_event(self, caplog):
        logger = logging.getLogger("test.events")

        with caplog.at_level(logging.INFO, logger="test.events"):
            log_resource_event(
                logger,
                controller=CONTROLLER_NAME,
                resource_kind=KIND_CONTROL_PLANE,
                resource_name="cp",
                namespace="default",
                uid="u1",
                event="deletion",
                reason="Deletion",
                message="Control plane is being deleted",
                cluster="test-cluster",
            )

        (payload,) = _payloads(caplog)
        assert payload["event"] == "deletion"
        assert payload["cluster"] == "test-cluster"
