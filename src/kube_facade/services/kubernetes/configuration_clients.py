"""Resource clients for ConfigMaps and Secrets."""

from __future__ import annotations

from kubernetes.client import V1ConfigMap, V1Secret

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient


class ConfigMapsApiClient(BaseNamespaceApiClient):
    """Client for namespaced ConfigMaps."""

    model = V1ConfigMap
    _entity_name = "ConfigMap"
    _resource = "config_map"


class SecretsApiClient(BaseNamespaceApiClient):
    """Client for namespaced Secrets."""

    model = V1Secret
    _entity_name = "Secret"
    _resource = "secret"
