"""Constants for the GKE Control Plane Operator."""

# API Group
API_GROUP = "gke.cloud37.dev"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_CONTROL_PLANE = "ManagedControlPlane"
KIND_NODE_POOL = "ManagedNodePool"
PLURAL_NODE_POOLS = "managednodepools"

# Labels
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"
LABEL_CLUSTER_NAME = f"{API_GROUP}/cluster-name"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Field Manager
FIELD_MANAGER = "gke-controlplane-operator"
CONTROLLER_NAME = "gke-controlplane-operator"

# Requeue interval used for every expected wait state
DEFAULT_RETRY_SECONDS = 15.0

# GKE spreads regional node pools over this many zones
DEFAULT_NUM_ZONES_PER_REGION = 3

# Condition Types
COND_READY = "Ready"
COND_CONTROL_PLANE_READY = "ControlPlaneReady"
COND_CONTROL_PLANE_CREATING = "ControlPlaneCreating"
COND_CONTROL_PLANE_UPDATING = "ControlPlaneUpdating"
COND_CONTROL_PLANE_DELETING = "ControlPlaneDeleting"

# Condition Reasons
REASON_RECONCILIATION_FAILED = "ReconciliationFailed"
REASON_REQUIRES_NODE_POOL = "RequiresAtLeastOneNodePool"
REASON_AUTOPILOT_NODE_POOLS = "AutopilotNodePoolsNotAllowed"
REASON_CREATING = "Creating"
REASON_CREATED = "Created"
REASON_UPDATED = "Updated"
REASON_DELETING = "Deleting"
REASON_DELETED = "Deleted"
REASON_ERROR = "Error"

# Condition Severities
SEVERITY_INFO = "Info"
SEVERITY_WARNING = "Warning"
SEVERITY_ERROR = "Error"

# Provider lifecycle states
STATUS_PROVISIONING = "PROVISIONING"
STATUS_RUNNING = "RUNNING"
STATUS_RECONCILING = "RECONCILING"
STATUS_STOPPING = "STOPPING"
STATUS_ERROR = "ERROR"
STATUS_DEGRADED = "DEGRADED"

# Release channels
RELEASE_CHANNEL_UNSPECIFIED = "UNSPECIFIED"
RELEASE_CHANNELS = {
    "rapid": "RAPID",
    "regular": "REGULAR",
    "stable": "STABLE",
}

# Kubeconfig secrets
KUBECONFIG_SECRET_SUFFIX = "kubeconfig"
USER_KUBECONFIG_SECRET_SUFFIX = "user-kubeconfig"
KUBECONFIG_SECRET_KEY = "value"
GKE_AUTH_PLUGIN = "gke-gcloud-auth-plugin"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
EVENT_REASON_CLUSTER_CREATING = "ClusterCreating"
EVENT_REASON_CLUSTER_UPDATING = "ClusterUpdating"
EVENT_REASON_CLUSTER_DELETING = "ClusterDeleting"
EVENT_REASON_CLUSTER_DEGRADED = "ClusterDegraded"
