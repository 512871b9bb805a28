"""GKE Control Plane Operator."""

__version__ = "0.1.0"
