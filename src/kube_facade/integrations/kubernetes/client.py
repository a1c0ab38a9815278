"""Kubernetes API client wrapper.

Wraps the official kubernetes Python client with an explicit, per-instance
connection configuration, lazy API group initialization, retry logic and
consistent error translation.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.exceptions import HTTPError

from kube_facade.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesUpstreamError,
    KubernetesValidationError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)

if TYPE_CHECKING:
    from kubernetes.client import ApiClient, CoreV1Api, NetworkingV1Api

    from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig

logger = structlog.get_logger()

T = TypeVar("T")


class KubernetesClient:
    """Kubernetes API client bound to a single cluster and namespace.

    Wraps the official kubernetes Python client with:
    - A private ``Configuration``/``ApiClient`` pair (no process-global state)
    - Lazy API group initialization
    - Automatic retry with tenacity for transient errors
    - Consistent error translation to custom exceptions
    - Context manager support

    Example:
        ```python
        from kube_facade.integrations.kubernetes import (
            ClusterConnectionConfig,
            KubernetesClient,
        )

        config = ClusterConnectionConfig.from_env()
        with KubernetesClient(config) as client:
            pods = client.request(
                client.core_v1.list_namespaced_pod, namespace=client.default_namespace
            )
            print(f"Namespace has {len(pods.items)} pods")
        ```
    """

    def __init__(
        self,
        connection_config: ClusterConnectionConfig,
        retrying: Retrying | None = None,
    ) -> None:
        """Initialize Kubernetes client from connection config.

        Args:
            connection_config: API server URL, credentials, namespace and timeouts.
            retrying: Retry policy for each API call. Defaults to exponential
                backoff on connection errors, ``retry_attempts`` times.
        """
        from kubernetes.client import ApiClient, Configuration

        self._config = connection_config
        self._retrying = retrying or self.make_default_retrying(connection_config.retry_attempts)

        configuration = Configuration()
        configuration.host = connection_config.api_url
        configuration.api_key = {"authorization": connection_config.token}
        configuration.api_key_prefix = {"authorization": "Bearer"}
        configuration.ssl_ca_cert = connection_config.ca_cert_file
        self._api_client: ApiClient | None = ApiClient(configuration)

        # Lazy-loaded API group instances
        self._core_v1: CoreV1Api | None = None
        self._networking_v1: NetworkingV1Api | None = None

        logger.info(
            "kubernetes_client_initialized",
            api_url=connection_config.api_url,
            namespace=connection_config.namespace,
        )

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def api_client(self) -> ApiClient:
        """Get the underlying ApiClient holding this client's configuration."""
        if self._api_client is None:
            raise KubernetesError("Kubernetes client is closed")
        return self._api_client

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (pods, services, secrets, configmaps, events, pvcs)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api(self.api_client)
        return self._core_v1

    @property
    def networking_v1(self) -> NetworkingV1Api:
        """Get NetworkingV1Api instance (ingresses)."""
        if self._networking_v1 is None:
            from kubernetes.client import NetworkingV1Api

            self._networking_v1 = NetworkingV1Api(self.api_client)
        return self._networking_v1

    # =========================================================================
    # Requests
    # =========================================================================

    def request(
        self,
        method: Callable[..., T],
        *args: Any,
        resource_type: str | None = None,
        resource_name: str | None = None,
        **kwargs: Any,
    ) -> T:
        """Call a kubernetes API method with retry and error translation.

        Args:
            method: Bound API method (e.g. ``core_v1.read_namespaced_pod``).
            *args: Positional arguments for the method.
            resource_type: Type of resource, used in error messages.
            resource_name: Name of the resource, used in error messages.
            **kwargs: Keyword arguments for the method.

        Returns:
            Whatever the API method returns.

        Raises:
            KubernetesError: Translated API or transport failure.
        """
        kwargs.setdefault("_request_timeout", self._config.request_timeout)
        namespace = kwargs.get("namespace")

        def attempt() -> T:
            from kubernetes.client import ApiException

            try:
                return method(*args, **kwargs)
            except (ApiException, HTTPError) as e:
                raise self.translate_api_exception(
                    e,
                    resource_type=resource_type,
                    resource_name=resource_name,
                    namespace=namespace,
                ) from e

        return self._retrying.copy()(attempt)

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes ApiException to a custom exception.

        Args:
            e: The original exception.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException

        if isinstance(e, HTTPError):
            return KubernetesConnectionError(
                message=f"Failed to connect to Kubernetes API: {e}",
                original_error=e,
            )

        if not isinstance(e, ApiException):
            return KubernetesUpstreamError(
                message=str(e),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        status = e.status
        details = _parse_status_body(e.body)
        message = details.get("message") or e.reason or f"Kubernetes API error: {status}"

        if status in (401, 403):
            return KubernetesAuthError(
                message=message,
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return ResourceNotFoundError(
                message=message,
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status == 409 and details.get("reason", "AlreadyExists") == "AlreadyExists":
            return ResourceAlreadyExistsError(
                message=message,
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status in (400, 422):
            return KubernetesValidationError(
                message=message,
                status_code=status,
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        return KubernetesUpstreamError(
            message=message,
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    # =========================================================================
    # Retry Policy
    # =========================================================================

    @staticmethod
    def make_default_retrying(attempts: int) -> Retrying:
        """Create the default retry policy for transient connection errors.

        Args:
            attempts: Maximum number of attempts per call.

        Returns:
            A tenacity Retrying configured with exponential backoff.
        """
        return Retrying(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def default_namespace(self) -> str:
        """Get the namespace resource clients operate in."""
        return self._config.namespace

    @property
    def config(self) -> ClusterConnectionConfig:
        """Get the connection configuration."""
        return self._config

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release resources."""
        if self._api_client is not None:
            self._api_client.close()
            self._api_client = None
        self._core_v1 = None
        self._networking_v1 = None
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()


def _parse_status_body(body: Any) -> dict[str, Any]:
    """Extract the Status object the API server sends with error responses."""
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}
