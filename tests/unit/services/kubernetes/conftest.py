"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient
from kube_facade.services.kubernetes.configuration_clients import (
    ConfigMapsApiClient,
    SecretsApiClient,
)
from kube_facade.services.kubernetes.event_clients import EventsApiClient
from kube_facade.services.kubernetes.facade import KubernetesApiClientFacade
from kube_facade.services.kubernetes.networking_clients import (
    IngressesApiClient,
    ServicesApiClient,
)
from kube_facade.services.kubernetes.storage_clients import PersistentVolumeClaimsApiClient
from kube_facade.services.kubernetes.workload_clients import PodsApiClient

CLIENT_CLASSES: dict[str, type[BaseNamespaceApiClient]] = {
    "config_maps": ConfigMapsApiClient,
    "events": EventsApiClient,
    "persistent_volume_claims": PersistentVolumeClaimsApiClient,
    "pods": PodsApiClient,
    "secrets": SecretsApiClient,
    "services": ServicesApiClient,
    "ingresses": IngressesApiClient,
}


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client."""
    mock_client = MagicMock()
    mock_client.default_namespace = "default"
    return mock_client


@pytest.fixture
def resource_clients() -> dict[str, MagicMock]:
    """Create one mock resource client per kind, keyed by facade accessor."""
    return {name: MagicMock(spec=cls) for name, cls in CLIENT_CLASSES.items()}


@pytest.fixture
def facade(resource_clients: dict[str, MagicMock]) -> KubernetesApiClientFacade:
    """Create a facade over mock resource clients."""
    return KubernetesApiClientFacade(**resource_clients)
