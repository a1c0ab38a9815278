"""Kubernetes service module.

Provides the resource clients for every supported kind, the router that
dispatches models to them, and the facade and factory built on top.
"""

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient
from kube_facade.services.kubernetes.configuration_clients import (
    ConfigMapsApiClient,
    SecretsApiClient,
)
from kube_facade.services.kubernetes.event_clients import EventsApiClient
from kube_facade.services.kubernetes.facade import KubernetesApiClientFacade
from kube_facade.services.kubernetes.factory import GenericClientFacadeFactory
from kube_facade.services.kubernetes.networking_clients import (
    IngressesApiClient,
    ServicesApiClient,
)
from kube_facade.services.kubernetes.pagination import ResourceCursor
from kube_facade.services.kubernetes.router import RESOURCE_KINDS, ResourceKind, ResourceRouter
from kube_facade.services.kubernetes.storage_clients import PersistentVolumeClaimsApiClient
from kube_facade.services.kubernetes.workload_clients import PodsApiClient

__all__ = [
    "RESOURCE_KINDS",
    "BaseNamespaceApiClient",
    "ConfigMapsApiClient",
    "EventsApiClient",
    "GenericClientFacadeFactory",
    "IngressesApiClient",
    "KubernetesApiClientFacade",
    "PersistentVolumeClaimsApiClient",
    "PodsApiClient",
    "ResourceCursor",
    "ResourceKind",
    "ResourceRouter",
    "SecretsApiClient",
    "ServicesApiClient",
]
