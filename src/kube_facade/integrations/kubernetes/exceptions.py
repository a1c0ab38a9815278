"""Kubernetes integration custom exceptions."""

from __future__ import annotations

from collections.abc import Sequence


class KubernetesError(Exception):
    """Base exception for Kubernetes operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from Kubernetes API (if applicable).
        resource_type: Type of resource involved (e.g., "Pod", "Secret").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource (if applicable).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize KubernetesError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from Kubernetes API.
            resource_type: Type of resource involved.
            resource_name: Name of the resource involved.
            namespace: Namespace of the resource.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            loc = f"[{self.resource_type}/{self.resource_name}"
            if self.namespace:
                loc += f" in {self.namespace}"
            loc += "]"
            parts.append(loc)
        return " ".join(parts)


class KubernetesConfigurationError(KubernetesError):
    """Exception raised for invalid local setup.

    Detected before any network activity, e.g. an unreadable CA certificate
    or a resource registry without a client for every kind.
    """


class UnsupportedResourceKindError(KubernetesError):
    """Exception raised when no resource client is registered for a kind."""

    def __init__(self, kind: object) -> None:
        """Initialize UnsupportedResourceKindError.

        Args:
            kind: The model class that could not be routed, or whatever was
                passed in its place (a string, a model instance, ...).
        """
        if isinstance(kind, type):
            qualified_name = f"{kind.__module__}.{kind.__qualname__}"
        elif isinstance(kind, str):
            qualified_name = kind
        else:
            qualified_name = f"instance of {type(kind).__qualname__}"
        super().__init__(message=f'Unknown K8S resource type "{qualified_name}"')
        self.kind = kind


class ResourceNotFoundError(KubernetesError):
    """Exception raised when the API confirms a resource does not exist (404)."""

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize ResourceNotFoundError.

        Args:
            message: Message reported by the API server.
            resource_type: Type of resource (e.g., "Pod", "Secret").
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
        """
        super().__init__(
            message=f"Resource not found: {message}",
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class ResourceAlreadyExistsError(KubernetesError):
    """Exception raised when a create request conflicts with an existing name (409)."""

    def __init__(
        self,
        message: str = "Kubernetes resource already exists",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize ResourceAlreadyExistsError.

        Args:
            message: Message reported by the API server.
            resource_type: Type of resource.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
        """
        super().__init__(
            message=f"Resource already exists: {message}",
            status_code=409,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesUpstreamError(KubernetesError):
    """Exception raised for any other API or transport failure.

    Raised once the retry policy has given up; fatal for the call
    that triggered it.
    """


class KubernetesConnectionError(KubernetesUpstreamError):
    """Exception raised when the API server cannot be reached.

    This includes refused connections, TLS failures and socket timeouts.
    It is the only error the default retry policy retries.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        """Initialize KubernetesConnectionError.

        Args:
            message: Human-readable error message.
            original_error: The original exception that caused this error.
        """
        super().__init__(message=message)
        self.original_error = original_error


class KubernetesAuthError(KubernetesUpstreamError):
    """Exception raised when authentication or authorization fails (401/403)."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
    ) -> None:
        """Initialize KubernetesAuthError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (usually 401 or 403).
            reason: Kubernetes API reason string.
        """
        super().__init__(message=message, status_code=status_code)
        self.reason = reason


class KubernetesValidationError(KubernetesUpstreamError):
    """Exception raised when the API rejects a request as invalid (400/422)."""


class KubernetesTimeoutError(KubernetesError):
    """Exception raised when waiting for resources to disappear times out."""

    def __init__(
        self,
        message: str = "Kubernetes operation timed out",
        timeout_seconds: float | None = None,
        pending: Sequence[str] = (),
    ) -> None:
        """Initialize KubernetesTimeoutError.

        Args:
            message: Human-readable error message.
            timeout_seconds: The timeout value that was exceeded.
            pending: Identifiers ("Kind/name") of resources still present.
        """
        if timeout_seconds is not None:
            message = f"{message} (after {timeout_seconds}s)"
        if pending:
            message = f"{message}: {', '.join(pending)}"
        super().__init__(message=message)
        self.timeout_seconds = timeout_seconds
        self.pending = list(pending)
