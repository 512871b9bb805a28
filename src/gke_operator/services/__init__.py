"""Provider services and the cluster reconciliation engine."""
