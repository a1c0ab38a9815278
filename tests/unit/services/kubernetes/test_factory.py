"""Unit tests for GenericClientFacadeFactory."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client import V1Ingress, V1Pod

from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig
from kube_facade.integrations.kubernetes.exceptions import KubernetesConfigurationError
from kube_facade.services.kubernetes.facade import KubernetesApiClientFacade
from kube_facade.services.kubernetes.factory import GenericClientFacadeFactory
from kube_facade.services.kubernetes.networking_clients import IngressesApiClient
from kube_facade.services.kubernetes.workload_clients import PodsApiClient

CLIENT_PATH = "kube_facade.services.kubernetes.factory.KubernetesClient"


@pytest.fixture
def ca_cert(tmp_path: Path) -> Path:
    """Create a readable CA certificate file."""
    path = tmp_path / "ca.crt"
    path.write_text("-----BEGIN CERTIFICATE-----\n")
    return path


@pytest.mark.unit
@pytest.mark.kubernetes
class TestGenericClientFacadeFactory:
    """Tests for GenericClientFacadeFactory."""

    def test_create_cluster_client(self, ca_cert: Path) -> None:
        """Should build a facade whose clients share one connection."""
        facade = GenericClientFacadeFactory().create_cluster_client(
            api_url="https://k8s.example.com:6443",
            token="token",
            ca_cert_file=str(ca_cert),
            namespace="jobs",
        )

        assert isinstance(facade, KubernetesApiClientFacade)
        assert isinstance(facade.get_api_for_resource(V1Pod), PodsApiClient)
        assert isinstance(facade.get_api_for_resource(V1Ingress), IngressesApiClient)
        assert facade.pods.namespace == "jobs"
        assert facade.pods._client is facade.secrets._client
        assert facade.pods._client.api_client.configuration.host == "https://k8s.example.com:6443"

    def test_invalid_ca_path_fails_before_client(self, tmp_path: Path) -> None:
        """Should validate the CA path before creating any client."""
        missing = tmp_path / "missing.crt"

        with patch(CLIENT_PATH) as mock_client_class:
            with pytest.raises(KubernetesConfigurationError, match="Invalid K8S CA cert path"):
                GenericClientFacadeFactory().create_cluster_client(
                    api_url="https://k8s", token="t", ca_cert_file=str(missing), namespace="ns"
                )

        mock_client_class.assert_not_called()

    def test_passes_retrying(self, ca_cert: Path) -> None:
        """Should hand the injected retry policy to the client."""
        retrying = MagicMock()
        config = ClusterConnectionConfig(
            api_url="https://k8s", token="t", ca_cert_file=str(ca_cert)
        )

        with patch(CLIENT_PATH) as mock_client_class:
            mock_client_class.return_value.default_namespace = "default"
            GenericClientFacadeFactory(retrying=retrying).create_from_config(config)

        mock_client_class.assert_called_once_with(config, retrying=retrying)

    def test_independent_facades(self, ca_cert: Path) -> None:
        """Should give every facade its own connection."""
        factory = GenericClientFacadeFactory()

        first = factory.create_cluster_client("https://a.example.com", "a", str(ca_cert), "a")
        second = factory.create_cluster_client("https://b.example.com", "b", str(ca_cert), "b")

        assert first.pods._client is not second.pods._client
        assert first.pods.namespace == "a"
        assert second.pods.namespace == "b"

    def test_create_from_env(self, monkeypatch: pytest.MonkeyPatch, ca_cert: Path) -> None:
        """Should read connection settings from K8S_* variables."""
        monkeypatch.setenv("K8S_HOST", "https://k8s.example.com")
        monkeypatch.setenv("K8S_TOKEN", "token")
        monkeypatch.setenv("K8S_CA_CERT_PATH", str(ca_cert))
        monkeypatch.setenv("K8S_NAMESPACE", "from-env")

        facade = GenericClientFacadeFactory().create_from_env()

        assert facade.config_maps.namespace == "from-env"

    def test_create_in_cluster_client(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Should build a facade from the mounted service account."""
        (tmp_path / "token").write_text("sa-token")
        (tmp_path / "ca.crt").write_text("-----BEGIN CERTIFICATE-----\n")
        (tmp_path / "namespace").write_text("workers")
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")
        monkeypatch.setattr(
            "kube_facade.integrations.kubernetes.config.SERVICE_ACCOUNT_DIR", tmp_path
        )

        with patch(CLIENT_PATH) as mock_client_class:
            mock_client_class.return_value.default_namespace = "workers"
            facade = GenericClientFacadeFactory().create_in_cluster_client()

        config = mock_client_class.call_args.args[0]
        assert config.api_url == "https://10.0.0.1:443"
        assert config.namespace == "workers"
        assert facade.pods.namespace == "workers"
