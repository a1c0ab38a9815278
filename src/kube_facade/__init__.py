"""Typed facade over the Kubernetes API for namespaced resources."""

from kube_facade.__version__ import __version__

__all__ = ["__version__"]
