"""Factory building facades for a cluster connection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from kube_facade.integrations.kubernetes.client import KubernetesClient
from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig
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

if TYPE_CHECKING:
    from tenacity import Retrying

logger = structlog.get_logger()


class GenericClientFacadeFactory:
    """Builds facades, each with its own independent API connection.

    Example:
        >>> factory = GenericClientFacadeFactory()
        >>> facade = factory.create_cluster_client(
        ...     api_url="https://k8s.example.com:6443",
        ...     token=token,
        ...     ca_cert_file="/etc/k8s/ca.crt",
        ...     namespace="jobs",
        ... )
    """

    def __init__(
        self,
        retrying: Retrying | None = None,
        log: structlog.BoundLogger | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            retrying: Retry policy applied to every API call of created
                facades; defaults to the client's connection-error backoff.
            log: Structured logger handed to created facades.
        """
        self._retrying = retrying
        self._log = log or logger

    def create_cluster_client(
        self,
        api_url: str,
        token: str,
        ca_cert_file: str,
        namespace: str,
    ) -> KubernetesApiClientFacade:
        """Create a facade for a cluster reachable with a bearer token.

        Args:
            api_url: API server URL.
            token: Bearer token.
            ca_cert_file: Path to the cluster CA certificate.
            namespace: Namespace all resource clients operate in.

        Raises:
            KubernetesConfigurationError: If the CA certificate can't be read.
        """
        return self.create_from_config(
            ClusterConnectionConfig(
                api_url=api_url,
                token=token,
                ca_cert_file=ca_cert_file,
                namespace=namespace,
            )
        )

    def create_from_env(self) -> KubernetesApiClientFacade:
        """Create a facade from ``K8S_*`` environment variables."""
        return self.create_from_config(ClusterConnectionConfig.from_env())

    def create_in_cluster_client(self, namespace: str | None = None) -> KubernetesApiClientFacade:
        """Create a facade from the service account mounted into the current pod.

        Args:
            namespace: Namespace override; defaults to the pod's namespace.
        """
        return self.create_from_config(ClusterConnectionConfig.from_service_account(namespace))

    def create_from_config(self, config: ClusterConnectionConfig) -> KubernetesApiClientFacade:
        """Create a facade from a connection config.

        Raises:
            KubernetesConfigurationError: If the CA certificate can't be read.
        """
        config.ensure_ca_cert_readable()

        client = KubernetesClient(config, retrying=self._retrying)
        self._log.debug("creating_facade", api_url=config.api_url, namespace=config.namespace)

        return KubernetesApiClientFacade(
            config_maps=ConfigMapsApiClient(client),
            events=EventsApiClient(client),
            persistent_volume_claims=PersistentVolumeClaimsApiClient(client),
            pods=PodsApiClient(client),
            secrets=SecretsApiClient(client),
            services=ServicesApiClient(client),
            ingresses=IngressesApiClient(client),
            log=self._log,
        )
