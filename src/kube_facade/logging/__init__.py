"""Logging configuration for kube_facade."""

from kube_facade.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
