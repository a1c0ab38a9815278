"""Kubernetes integration - API client, connection config and exceptions."""

from kube_facade.integrations.kubernetes.client import KubernetesClient
from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig
from kube_facade.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConfigurationError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesTimeoutError,
    KubernetesUpstreamError,
    KubernetesValidationError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    UnsupportedResourceKindError,
)

__all__ = [
    "ClusterConnectionConfig",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConfigurationError",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesTimeoutError",
    "KubernetesUpstreamError",
    "KubernetesValidationError",
    "ResourceAlreadyExistsError",
    "ResourceNotFoundError",
    "UnsupportedResourceKindError",
]
