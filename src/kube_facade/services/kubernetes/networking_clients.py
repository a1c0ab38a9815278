"""Resource clients for Services and Ingresses."""

from __future__ import annotations

from kubernetes.client import V1Ingress, V1Service

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient


class ServicesApiClient(BaseNamespaceApiClient):
    """Client for namespaced Services."""

    model = V1Service
    _entity_name = "Service"
    _resource = "service"


class IngressesApiClient(BaseNamespaceApiClient):
    """Client for namespaced Ingresses (networking.k8s.io/v1)."""

    model = V1Ingress
    _entity_name = "Ingress"
    _api_group = "networking_v1"
    _resource = "ingress"
