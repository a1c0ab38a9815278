"""Service layer for kube_facade."""
