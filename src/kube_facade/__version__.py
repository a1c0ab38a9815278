"""Version information for kube_facade."""

__version__ = "0.1.0"
