"""Prometheus metrics for the GKE Control Plane Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "gke_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "gke_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

error_total = Counter(
    "gke_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "gke_operator_resource_status_total",
    "Resource readiness observed at the end of a reconciliation",
    ["kind", "status"],
)

# GKE cluster operation metrics
cluster_operations_total = Counter(
    "gke_operator_cluster_operations_total",
    "Total number of GKE cluster operations",
    ["operation", "result"],
)

cluster_lifecycle_status_total = Counter(
    "gke_operator_cluster_lifecycle_status_total",
    "Observed GKE cluster lifecycle states",
    ["status"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "gke_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind", "resource_type"],
)

# API call metrics
api_call_total = Counter(
    "gke_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "gke_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)
