"""Kubernetes API client facade.

Single entry point over the per-kind resource clients: uniform get,
batch create/delete over mixed kinds, bulk delete by query across every
kind, paged listing and waiting for deletions to converge.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

import structlog
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
    KubernetesTimeoutError,
    ResourceNotFoundError,
)
from kube_facade.services.kubernetes.pagination import ResourceCursor
from kube_facade.services.kubernetes.router import ResourceRouter, kind_name

if TYPE_CHECKING:
    from kubernetes.client import V1DeleteOptions

    from kube_facade.services.kubernetes.base import BaseNamespaceApiClient, Query
    from kube_facade.services.kubernetes.configuration_clients import (
        ConfigMapsApiClient,
        SecretsApiClient,
    )
    from kube_facade.services.kubernetes.event_clients import EventsApiClient
    from kube_facade.services.kubernetes.networking_clients import (
        IngressesApiClient,
        ServicesApiClient,
    )
    from kube_facade.services.kubernetes.storage_clients import PersistentVolumeClaimsApiClient
    from kube_facade.services.kubernetes.workload_clients import PodsApiClient

logger = structlog.get_logger()

DEFAULT_WAIT_TIMEOUT = 30.0
POLL_INTERVAL = 0.1


class KubernetesApiClientFacade:
    """Facade over the resource clients of one namespace.

    The facade keeps no state besides references to its resource clients,
    so a single instance can serve any number of calls, including
    concurrent ones from different threads.

    Example:
        >>> facade = GenericClientFacadeFactory().create_from_env()
        >>> facade.create_models([pod, secret])
        >>> facade.delete_all_matching(query={"labelSelector": "app=my-app"})
    """

    def __init__(
        self,
        *,
        config_maps: ConfigMapsApiClient,
        events: EventsApiClient,
        persistent_volume_claims: PersistentVolumeClaimsApiClient,
        pods: PodsApiClient,
        secrets: SecretsApiClient,
        services: ServicesApiClient,
        ingresses: IngressesApiClient,
        log: structlog.BoundLogger | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            config_maps: ConfigMaps client.
            events: Events client.
            persistent_volume_claims: PersistentVolumeClaims client.
            pods: Pods client.
            secrets: Secrets client.
            services: Services client.
            ingresses: Ingresses client.
            log: Structured logger; defaults to the module logger.
        """
        self._config_maps = config_maps
        self._events = events
        self._persistent_volume_claims = persistent_volume_claims
        self._pods = pods
        self._secrets = secrets
        self._services = services
        self._ingresses = ingresses
        self._router = ResourceRouter(
            {
                V1ConfigMap: config_maps,
                CoreV1Event: events,
                V1PersistentVolumeClaim: persistent_volume_claims,
                V1Pod: pods,
                V1Secret: secrets,
                V1Service: services,
                V1Ingress: ingresses,
            }
        )
        self._log = (log or logger).bind(service="kubernetes_facade")

    # =========================================================================
    # Resource Client Accessors
    # =========================================================================

    @property
    def config_maps(self) -> ConfigMapsApiClient:
        """ConfigMaps client."""
        return self._config_maps

    @property
    def events(self) -> EventsApiClient:
        """Events client."""
        return self._events

    @property
    def persistent_volume_claims(self) -> PersistentVolumeClaimsApiClient:
        """PersistentVolumeClaims client."""
        return self._persistent_volume_claims

    @property
    def pods(self) -> PodsApiClient:
        """Pods client."""
        return self._pods

    @property
    def secrets(self) -> SecretsApiClient:
        """Secrets client."""
        return self._secrets

    @property
    def services(self) -> ServicesApiClient:
        """Services client."""
        return self._services

    @property
    def ingresses(self) -> IngressesApiClient:
        """Ingresses client."""
        return self._ingresses

    @property
    def kinds(self) -> tuple[type, ...]:
        """Supported resource kinds in the order bulk operations visit them."""
        return self._router.kinds

    def get_api_for_resource(self, kind: type) -> BaseNamespaceApiClient:
        """Get the resource client handling a kind.

        Args:
            kind: kubernetes model class (e.g. ``V1Pod``).

        Raises:
            UnsupportedResourceKindError: If the kind is not supported.
        """
        return self._router.route_for(kind)

    # =========================================================================
    # Single Resource Operations
    # =========================================================================

    def get(self, kind: type, name: str, query: Query | None = None) -> Any:
        """Get a single resource of any supported kind.

        Args:
            kind: kubernetes model class (e.g. ``V1Pod``).
            name: Resource name.
            query: Additional query parameters.

        Returns:
            The resource model.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            KubernetesUpstreamError: For any other API failure.
        """
        return self._router.route_for(kind).get(name, query or {})

    # =========================================================================
    # Batch Operations
    # =========================================================================

    def create_models(self, resources: Iterable[Any], query: Query | None = None) -> list[Any]:
        """Create resources of mixed kinds, in order.

        Stops at the first failure and re-raises it; resources after the
        failing one are never submitted and those already created are kept.

        Args:
            resources: Models to create.
            query: Query parameters for every create call.

        Returns:
            Created resources as returned by the server, in input order.
        """
        results = []
        for resource in resources:
            api = self._router.route_for(type(resource))
            results.append(api.create(resource, query or {}))
        self._log.info("created_models", count=len(results))
        return results

    def delete_models(
        self,
        resources: Iterable[Any],
        delete_options: V1DeleteOptions | None = None,
        query: Query | None = None,
    ) -> list[Any]:
        """Delete resources of mixed kinds, in order.

        Same fail-fast semantics as ``create_models``.

        Args:
            resources: Models to delete; only kind and name are used.
            delete_options: Options forwarded to every delete call.
            query: Query parameters for every delete call.

        Returns:
            Status results, in input order.
        """
        results = []
        for resource in resources:
            api = self._router.route_for(type(resource))
            results.append(api.delete(resource.metadata.name, delete_options, query or {}))
        self._log.info("deleted_models", count=len(results))
        return results

    def delete_all_matching(
        self,
        delete_options: V1DeleteOptions | None = None,
        query: Query | None = None,
        kinds: Iterable[type] | None = None,
    ) -> None:
        """Delete resources matching a query across resource kinds.

        Every targeted kind is attempted even if an earlier one fails.
        Once all were attempted, the first failure is re-raised.

        Args:
            delete_options: Options forwarded to every delete-collection call.
            query: Query parameters, typically a labelSelector.
            kinds: Restrict to these kinds; defaults to every supported kind.
                Kinds are always visited in registry order.

        Raises:
            UnsupportedResourceKindError: If ``kinds`` names an unsupported
                kind; raised before anything is deleted.
        """
        if kinds is None:
            targets = self._router.kinds
        else:
            requested = list(kinds)
            for kind in requested:
                self._router.route_for(kind)
            targets = tuple(kind for kind in self._router.kinds if kind in requested)

        first_error: Exception | None = None
        for kind in targets:
            try:
                self._router.route_for(kind).delete_collection(delete_options, query or {})
            except Exception as e:
                self._log.warning(
                    "delete_collection_failed",
                    kind=kind_name(kind),
                    error=str(e),
                )
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error

    def list_matching(self, kind: type, query: Query | None = None) -> ResourceCursor:
        """Iterate over every resource of a kind matching a query.

        No request is made until the returned cursor is consumed.

        Args:
            kind: kubernetes model class (e.g. ``V1Pod``).
            query: Query parameters; ``limit`` sets the page size.

        Returns:
            A cursor yielding resources across all pages.
        """
        return ResourceCursor(self._router.route_for(kind), query)

    # =========================================================================
    # Waiting
    # =========================================================================

    def wait_while_exists(
        self,
        resources: Sequence[Any],
        timeout: float = DEFAULT_WAIT_TIMEOUT,
    ) -> None:
        """Block until none of the resources exists any more.

        Polls every still-present resource once per round. A not-found
        response counts as deleted; a successful read or any other error
        keeps the resource pending. The deadline is also checked between
        polls, so a slow round stops early once it has passed.

        Args:
            resources: Models to wait for; only kind and name are used.
            timeout: Maximum time to wait in seconds.

        Raises:
            KubernetesTimeoutError: If resources still exist after ``timeout``.
        """
        pending = [(self._router.route_for(type(r)), r) for r in resources]
        start = time.monotonic()

        while pending:
            still_pending = []
            for index, (api, resource) in enumerate(pending):
                if index and time.monotonic() - start >= timeout:
                    still_pending.extend(pending[index:])
                    break
                name = resource.metadata.name
                try:
                    api.get(name)
                except ResourceNotFoundError:
                    continue
                except Exception as e:
                    self._log.debug(
                        "wait_poll_failed",
                        resource=_describe(resource),
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                still_pending.append((api, resource))
            pending = still_pending

            if not pending:
                break

            if time.monotonic() - start >= timeout:
                raise KubernetesTimeoutError(
                    message="Timeout while waiting for resources to be deleted",
                    timeout_seconds=timeout,
                    pending=[_describe(resource) for _, resource in pending],
                )

            self._log.debug("wait_round", pending=len(pending))
            time.sleep(POLL_INTERVAL)


def _describe(resource: Any) -> str:
    """Identify a resource as "Kind/name"."""
    return f"{kind_name(type(resource))}/{resource.metadata.name}"
