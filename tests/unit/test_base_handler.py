"""Tests for base handler functionality."""

from __future__ import annotations

from unittest.mock import Mock, patch

import kopf
import pytest

from gke_operator.constants import FINALIZER
from gke_operator.handlers.base import BaseHandler

BODY = {"metadata": {"name": "test-resource", "namespace": "default"}}


class TestBaseHandler:
    """Test cases for BaseHandler class."""

    def test_init(self):
        handler = BaseHandler(kind="TestKind")
        assert handler.kind == "TestKind"
        assert handler.logger is not None

    def test_ensure_finalizer_adds_when_missing(self):
        handler = BaseHandler(kind="TestKind")
        meta = {"finalizers": ["other-finalizer"]}
        patch_obj = kopf.Patch()

        handler.ensure_finalizer(meta, patch_obj)

        assert patch_obj.metadata["finalizers"] == ["other-finalizer", FINALIZER]
        assert meta["finalizers"] == ["other-finalizer"]

    def test_ensure_finalizer_no_patch_when_present(self):
        handler = BaseHandler(kind="TestKind")
        patch_obj = kopf.Patch()

        handler.ensure_finalizer({"finalizers": [FINALIZER]}, patch_obj)

        assert "finalizers" not in patch_obj.metadata

    def test_remove_finalizer(self):
        handler = BaseHandler(kind="TestKind")
        patch_obj = kopf.Patch()

        handler.remove_finalizer({"finalizers": [FINALIZER, "other-finalizer"]}, patch_obj)

        assert patch_obj.metadata["finalizers"] == ["other-finalizer"]

    def test_remove_finalizer_sets_none_when_empty(self):
        handler = BaseHandler(kind="TestKind")
        patch_obj = kopf.Patch()

        handler.remove_finalizer({"finalizers": [FINALIZER]}, patch_obj)

        assert patch_obj.metadata["finalizers"] is None

    @patch("gke_operator.handlers.base.emit_validate_failed")
    @patch("gke_operator.handlers.base.metrics")
    def test_handle_validation_error(self, mock_metrics, mock_emit):
        handler = BaseHandler(kind="TestKind")

        with pytest.raises(ValueError, match="network.name is required"):
            handler.handle_validation_error(BODY, "network.name is required")

        mock_emit.assert_called_once_with(BODY, "network.name is required")
        mock_metrics.reconcile_total.labels.assert_called_with(kind="TestKind", result="failed")

    @patch("gke_operator.handlers.base.emit_reconcile_started")
    @patch("gke_operator.handlers.base.metrics")
    def test_reconcile_with_metrics_success(self, mock_metrics, mock_emit_started):
        handler = BaseHandler(kind="TestKind")
        reconcile_fn = Mock(return_value="done")

        assert handler.reconcile_with_metrics(BODY, reconcile_fn) == "done"

        reconcile_fn.assert_called_once()
        mock_emit_started.assert_called_once_with(BODY)
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="started")
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="success")
        assert mock_metrics.reconcile_duration_seconds.labels.called

    @patch("gke_operator.handlers.base.emit_reconcile_failed")
    @patch("gke_operator.handlers.base.emit_reconcile_started")
    @patch("gke_operator.handlers.base.metrics")
    def test_reconcile_with_metrics_requeue(self, mock_metrics, mock_emit_started, mock_emit_failed):
        handler = BaseHandler(kind="TestKind")

        def requeue():
            raise kopf.TemporaryError("waiting", delay=15)

        with pytest.raises(kopf.TemporaryError):
            handler.reconcile_with_metrics(BODY, requeue)

        mock_emit_failed.assert_not_called()
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="requeued")
        mock_metrics.error_total.labels.assert_not_called()

    @patch("gke_operator.handlers.base.emit_reconcile_failed")
    @patch("gke_operator.handlers.base.emit_reconcile_started")
    @patch("gke_operator.handlers.base.metrics")
    @patch("gke_operator.handlers.base.sanitize_exception")
    def test_reconcile_with_metrics_failure(
        self, mock_sanitize, mock_metrics, mock_emit_started, mock_emit_failed
    ):
        handler = BaseHandler(kind="TestKind")
        test_error = ValueError("Test error")
        mock_sanitize.return_value = "Sanitized error"

        def failing_fn():
            raise test_error

        with pytest.raises(ValueError):
            handler.reconcile_with_metrics(BODY, failing_fn)

        mock_sanitize.assert_any_call(test_error)
        mock_emit_failed.assert_called_once_with(BODY, "Reconciliation failed: Sanitized error")
        mock_metrics.error_total.labels.assert_called_with(kind="TestKind", error_type="ValueError")
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="error")

    @patch("gke_operator.handlers.base.metrics")
    def test_update_resource_status(self, mock_metrics):
        handler = BaseHandler(kind="TestKind")
        patch_obj = kopf.Patch()

        handler.update_resource_status(
            patch_obj, {"name": "test-resource", "generation": 5}, ready=False, status_data={"ready": False}
        )

        assert patch_obj.status["observedGeneration"] == 5
        assert patch_obj.status["ready"] is False
        mock_metrics.resource_status_total.labels.assert_called_with(kind="TestKind", status="not_ready")
