"""Error types and sanitization utilities to prevent information leakage."""

import re


class ClusterReconcileError(Exception):
    """Base class for errors raised by the cluster reconciliation engine."""


class ClusterPreconditionError(ClusterReconcileError):
    """The desired state can never be satisfied as declared.

    Raised before any provider call is made. Retrying does not help until
    the desired state itself changes.
    """


class AutopilotNodePoolsNotAllowedError(ClusterPreconditionError):
    """Node pools were declared for an autopilot cluster."""

    def __init__(self, pool_count: int) -> None:
        self.pool_count = pool_count
        super().__init__(
            f"cannot create autopilot cluster with node pools: {pool_count} node pools defined"
        )


class NodePoolPreflightError(ClusterPreconditionError):
    """A declared node pool failed the checks run before cluster creation."""


class UnexpectedClusterStatusError(ClusterReconcileError):
    """The provider reported a lifecycle status this operator does not know."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"unexpected cluster status {status}")


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"([a-z0-9\-]+)@[a-z0-9\-]+\.iam\.gserviceaccount\.com",
    r"(ya29)\.[A-Za-z0-9\-_\.]+",
    r"(Bearer)\s+[A-Za-z0-9\-_\.=]+",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_token",
    "refresh_token",
    "private_key_id",
    "private_key",
    "client_secret",
    "password",
    "token",
    "credentials",
}

_PRIVATE_KEY_BLOCK = re.compile(
    r"-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----",
    flags=re.DOTALL,
)


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = _PRIVATE_KEY_BLOCK.sub("[REDACTED]", message)

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1 [REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in sorted(SENSITIVE_FIELDS, key=len, reverse=True):
        sanitized = re.sub(
            rf"\b{field}[\"']?[:=\s]+[\"']?([^\s,;\)\"']+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))

