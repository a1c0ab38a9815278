"""Base resource client for namespaced Kubernetes resources.

Provides the CRUD contract shared by every resource kind: get, list,
create, delete and delete-collection, each issued as one API call through
the retrying, error-translating KubernetesClient.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

import structlog

if TYPE_CHECKING:
    from kubernetes.client import V1DeleteOptions

    from kube_facade.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()

Query = Mapping[str, str | int]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Query keys that collide with Python keywords in the generated client
_RESERVED_KWARGS = {"continue": "_continue"}


def to_api_kwargs(query: Query | None) -> dict[str, Any]:
    """Translate API query parameter names to kubernetes client kwargs.

    ``labelSelector`` becomes ``label_selector`` and ``continue`` becomes
    ``_continue``. Keys already in snake_case pass through unchanged.

    Args:
        query: Query parameters using Kubernetes API names.

    Returns:
        Keyword arguments for a generated kubernetes API method.
    """
    if not query:
        return {}
    kwargs: dict[str, Any] = {}
    for key, value in query.items():
        arg = _CAMEL_BOUNDARY.sub("_", key).lower()
        kwargs[_RESERVED_KWARGS.get(arg, arg)] = value
    return kwargs


class BaseNamespaceApiClient:
    """Base class for namespaced resource clients.

    Subclasses declare which model they handle and where the generated
    kubernetes client keeps the methods for it:

    - ``model``: the kubernetes model class (e.g. ``V1Pod``)
    - ``_entity_name``: resource type for logs and error messages
    - ``_api_group``: KubernetesClient property exposing the API group
    - ``_resource``: method suffix, e.g. ``pod`` for ``read_namespaced_pod``

    Example:
        >>> class PodsApiClient(BaseNamespaceApiClient):
        ...     model = V1Pod
        ...     _entity_name = "Pod"
        ...     _resource = "pod"
    """

    model: ClassVar[type]
    _entity_name: ClassVar[str] = ""
    _api_group: ClassVar[str] = "core_v1"
    _resource: ClassVar[str] = ""

    def __init__(self, client: KubernetesClient, namespace: str | None = None) -> None:
        """Initialize the resource client.

        Args:
            client: Kubernetes API client instance.
            namespace: Namespace to operate in; defaults to the client's namespace.
        """
        self._client = client
        self._namespace = namespace or client.default_namespace
        self._log = logger.bind(entity=self._entity_name, namespace=self._namespace)

    @property
    def namespace(self) -> str:
        """Namespace this client operates in."""
        return self._namespace

    @property
    def entity_name(self) -> str:
        """Resource type handled by this client."""
        return self._entity_name

    def _api_method(self, action: str) -> Callable[..., Any]:
        """Look up the generated API method for an action on this resource."""
        api = getattr(self._client, self._api_group)
        return getattr(api, f"{action}_namespaced_{self._resource}")

    def _request(
        self,
        action: str,
        resource_name: str | None,
        query: Query | None,
        **kwargs: Any,
    ) -> Any:
        return self._client.request(
            self._api_method(action),
            namespace=self._namespace,
            resource_type=self._entity_name,
            resource_name=resource_name,
            **to_api_kwargs(query),
            **kwargs,
        )

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def list(self, query: Query | None = None) -> Any:
        """List one page of resources.

        Args:
            query: Query parameters (labelSelector, limit, continue, ...).

        Returns:
            The list object; ``items`` holds the page and
            ``metadata._continue`` the token for the next one.
        """
        self._log.debug("listing_resources", query=dict(query or {}))
        result = self._request("list", None, query)
        self._log.debug("listed_resources", count=len(result.items or []))
        return result

    def get(self, name: str, query: Query | None = None) -> Any:
        """Get a single resource by name.

        Args:
            name: Resource name.
            query: Additional query parameters.

        Returns:
            The resource model.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            KubernetesUpstreamError: For any other API failure.
        """
        self._log.debug("getting_resource", name=name)
        return self._request("read", name, query, name=name)

    def create(self, resource: Any, query: Query | None = None) -> Any:
        """Create a resource.

        Args:
            resource: Model to create.
            query: Additional query parameters (e.g. dryRun).

        Returns:
            The server's representation of the created resource.

        Raises:
            ResourceAlreadyExistsError: If a resource with the same name exists.
            KubernetesUpstreamError: For any other API failure.
        """
        name = resource.metadata.name if resource.metadata else None
        self._log.info("creating_resource", name=name)
        result = self._request("create", name, query, body=resource)
        self._log.info("created_resource", name=name)
        return result

    def delete(
        self,
        name: str,
        delete_options: V1DeleteOptions | None = None,
        query: Query | None = None,
    ) -> Any:
        """Delete a resource by name.

        Args:
            name: Resource name.
            delete_options: Grace period, propagation policy, ...
            query: Additional query parameters.

        Returns:
            The status returned by the API server.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            KubernetesUpstreamError: For any other API failure.
        """
        self._log.info("deleting_resource", name=name)
        result = self._request("delete", name, query, name=name, body=delete_options)
        self._log.info("deleted_resource", name=name)
        return result

    def delete_collection(
        self,
        delete_options: V1DeleteOptions | None = None,
        query: Query | None = None,
    ) -> Any:
        """Delete all resources matching a query.

        Deletion happens asynchronously on the server; the resources may
        still exist when this returns.

        Args:
            delete_options: Grace period, propagation policy, ...
            query: Query parameters, typically a labelSelector.

        Returns:
            The status returned by the API server.
        """
        self._log.info("deleting_collection", query=dict(query or {}))
        return self._request("delete_collection", None, query, body=delete_options)
