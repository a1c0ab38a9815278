"""Command line interface for kube_facade."""
