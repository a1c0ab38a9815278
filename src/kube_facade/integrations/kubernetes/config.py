"""Kubernetes connection configuration model."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from kube_facade.integrations.kubernetes.exceptions import KubernetesConfigurationError

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")


class ClusterConnectionConfig(BaseModel):
    """Connection settings for a single Kubernetes API server.

    Instances are immutable: talking to another cluster means building
    a new config (and a new facade), never mutating an existing one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_url: str
    token: str
    ca_cert_file: str
    namespace: str = "default"
    connect_timeout: float = 30
    read_timeout: float = 60
    retry_attempts: int = 3

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate API server URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("ca_cert_file")
    @classmethod
    def validate_ca_cert_file(cls, v: str) -> str:
        """Expand ~ in CA certificate path."""
        return str(Path(v).expanduser())

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeouts are positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is non-negative."""
        if v < 0:
            raise ValueError("retry_attempts must be non-negative")
        return v

    def ensure_ca_cert_readable(self) -> None:
        """Check the CA certificate file exists and can be read.

        Raises:
            KubernetesConfigurationError: If the file is missing or unreadable.
        """
        path = Path(self.ca_cert_file)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise KubernetesConfigurationError(
                f'Invalid K8S CA cert path "{self.ca_cert_file}". '
                "File does not exist or can't be read."
            )

    @property
    def request_timeout(self) -> tuple[float, float]:
        """Connect/read timeout pair as accepted by the kubernetes client."""
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> ClusterConnectionConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            K8S_HOST: API server URL
            K8S_TOKEN: Bearer token for authentication
            K8S_CA_CERT_PATH: Path to the cluster CA certificate
            K8S_NAMESPACE: Namespace all resource clients operate in
            K8S_CONNECT_TIMEOUT: Connect timeout in seconds
            K8S_READ_TIMEOUT: Read timeout in seconds
            K8S_RETRY_ATTEMPTS: Attempts for transient connection failures
        """
        config_dict = base_config.copy() if base_config else {}

        if api_url := os.environ.get("K8S_HOST"):
            config_dict["api_url"] = api_url
        if token := os.environ.get("K8S_TOKEN"):
            config_dict["token"] = token
        if ca_cert_file := os.environ.get("K8S_CA_CERT_PATH"):
            config_dict["ca_cert_file"] = ca_cert_file
        if namespace := os.environ.get("K8S_NAMESPACE"):
            config_dict["namespace"] = namespace
        if connect_timeout := os.environ.get("K8S_CONNECT_TIMEOUT"):
            config_dict["connect_timeout"] = float(connect_timeout)
        if read_timeout := os.environ.get("K8S_READ_TIMEOUT"):
            config_dict["read_timeout"] = float(read_timeout)
        if retry_attempts := os.environ.get("K8S_RETRY_ATTEMPTS"):
            config_dict["retry_attempts"] = int(retry_attempts)

        return cls.model_validate(config_dict)

    @classmethod
    def from_service_account(
        cls,
        namespace: str | None = None,
        *,
        service_account_dir: Path | None = None,
    ) -> ClusterConnectionConfig:
        """Create configuration from the service account mounted into a pod.

        Args:
            namespace: Namespace override; defaults to the pod's own namespace.
            service_account_dir: Directory holding token, ca.crt and namespace;
                defaults to the standard mount point.

        Raises:
            KubernetesConfigurationError: If not running inside a cluster.
        """
        host = os.environ.get("KUBERNETES_SERVICE_HOST")
        port = os.environ.get("KUBERNETES_SERVICE_PORT")
        if not host or not port:
            raise KubernetesConfigurationError(
                "KUBERNETES_SERVICE_HOST and KUBERNETES_SERVICE_PORT must be set "
                "to use in-cluster configuration"
            )

        service_account_dir = service_account_dir or SERVICE_ACCOUNT_DIR
        token_file = service_account_dir / "token"
        try:
            token = token_file.read_text().strip()
        except OSError as e:
            raise KubernetesConfigurationError(
                f'Cannot read service account token "{token_file}": {e}'
            ) from e

        if namespace is None:
            namespace_file = service_account_dir / "namespace"
            namespace = namespace_file.read_text().strip() if namespace_file.is_file() else "default"

        if ":" in host:
            host = f"[{host}]"

        return cls(
            api_url=f"https://{host}:{port}",
            token=token,
            ca_cert_file=str(service_account_dir / "ca.crt"),
            namespace=namespace,
        )
