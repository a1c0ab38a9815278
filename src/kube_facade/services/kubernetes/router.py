"""Resource kind registry and routing.

The registry is the single place resource kinds are declared. Adding a
kind means adding one entry here and one resource client.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from kubernetes.client import (
    CoreV1Event,
    V1ConfigMap,
    V1Ingress,
    V1PersistentVolumeClaim,
    V1Pod,
    V1Secret,
    V1Service,
)

from kube_facade.integrations.kubernetes.exceptions import (
    KubernetesConfigurationError,
    UnsupportedResourceKindError,
)

if TYPE_CHECKING:
    from kube_facade.services.kubernetes.base import BaseNamespaceApiClient


@dataclass(frozen=True)
class ResourceKind:
    """A supported resource kind.

    Attributes:
        model: kubernetes model class used as the routing key.
        name: Kind name as reported by the API (e.g. "Pod").
        plural: Lowercase plural used on the command line (e.g. "pods").
    """

    model: type
    name: str
    plural: str


# Registry order is the order bulk operations visit kinds in.
RESOURCE_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind(V1ConfigMap, "ConfigMap", "configmaps"),
    ResourceKind(CoreV1Event, "Event", "events"),
    ResourceKind(V1PersistentVolumeClaim, "PersistentVolumeClaim", "persistentvolumeclaims"),
    ResourceKind(V1Pod, "Pod", "pods"),
    ResourceKind(V1Secret, "Secret", "secrets"),
    ResourceKind(V1Service, "Service", "services"),
    ResourceKind(V1Ingress, "Ingress", "ingresses"),
)

_KINDS_BY_MODEL = {kind.model: kind for kind in RESOURCE_KINDS}


def kind_for_plural(plural: str) -> type:
    """Resolve a plural kind name (e.g. "pods") to its model class.

    Raises:
        ValueError: If no registered kind has that name.
    """
    for kind in RESOURCE_KINDS:
        if kind.plural == plural.lower():
            return kind.model
    choices = ", ".join(kind.plural for kind in RESOURCE_KINDS)
    raise ValueError(f"Unknown resource kind '{plural}'. Expected one of: {choices}")


def kind_name(model: type) -> str:
    """Kind name for a registered model class, falling back to the class name."""
    kind = _KINDS_BY_MODEL.get(model)
    return kind.name if kind else model.__name__


class ResourceRouter:
    """Maps resource kinds to the resource client that handles them.

    Construction fails unless there is exactly one client for every
    registered kind, so routing is total over the registry.
    """

    def __init__(self, api_clients: Mapping[type, BaseNamespaceApiClient]) -> None:
        """Initialize the router.

        Args:
            api_clients: Resource client for each registered model class.

        Raises:
            KubernetesConfigurationError: If the mapping does not cover the
                registry exactly.
        """
        missing = [kind.name for kind in RESOURCE_KINDS if api_clients.get(kind.model) is None]
        unknown = [model.__name__ for model in api_clients if model not in _KINDS_BY_MODEL]
        if missing or unknown:
            raise KubernetesConfigurationError(
                "Resource clients do not match the resource kind registry "
                f"(missing: {', '.join(missing) or '-'}; unknown: {', '.join(unknown) or '-'})"
            )
        self._routes: Mapping[type, BaseNamespaceApiClient] = MappingProxyType(dict(api_clients))

    @property
    def kinds(self) -> tuple[type, ...]:
        """Registered model classes in registry order."""
        return tuple(kind.model for kind in RESOURCE_KINDS)

    def route_for(self, kind: Any) -> BaseNamespaceApiClient:
        """Get the resource client for a kind.

        Args:
            kind: kubernetes model class (e.g. ``V1Pod``).

        Returns:
            The resource client registered for the kind.

        Raises:
            UnsupportedResourceKindError: If the kind is not registered,
                including keys that are not model classes at all.
        """
        try:
            return self._routes[kind]
        except (KeyError, TypeError):
            raise UnsupportedResourceKindError(kind) from None
