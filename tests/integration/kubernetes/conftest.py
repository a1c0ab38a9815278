"""Kubernetes integration test fixtures using testcontainers K3S.

Provides a real K3S (lightweight Kubernetes) cluster in Docker. Facades
connect to it the way they connect to any cluster: API URL, bearer token
of a service account, and the cluster CA certificate.
"""

from __future__ import annotations

import base64
import contextlib
import os
import subprocess
import time
import uuid
from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest
import yaml
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from kube_facade.integrations.kubernetes.client import KubernetesClient
from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig
from kube_facade.services.kubernetes import GenericClientFacadeFactory, KubernetesApiClientFacade

if TYPE_CHECKING:
    from pathlib import Path


# ============================================================================
# Docker Availability Check
# ============================================================================


def _docker_available() -> bool:
    """Check if Docker daemon is running."""
    try:
        result = subprocess.run(
            ["docker", "info"],
            capture_output=True,
            timeout=10,
        )
        return result.returncode == 0
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False


# ============================================================================
# K3S Container Class
# ============================================================================

K3S_IMAGE = os.environ.get("K3S_TEST_IMAGE", "rancher/k3s:v1.31.4-k3s1")
SERVICE_ACCOUNT = "kube-facade-test"


class K3SContainer(DockerContainer):  # type: ignore[misc]
    """Single-node K3S cluster with the API server on a random host port."""

    K8S_API_PORT = 6443

    def __init__(self, image: str = K3S_IMAGE) -> None:
        super().__init__(image)

        self.with_command(
            "server"
            " --disable=traefik"
            " --disable=metrics-server"
            " --tls-san=0.0.0.0"
            " --write-kubeconfig-mode=644"
        )
        self.with_exposed_ports(self.K8S_API_PORT)

        # K3S needs elevated privileges to run containerd
        self.with_kwargs(
            privileged=True,
            tmpfs={"/run": "", "/var/run": ""},
        )

    def kubectl(self, *args: str) -> str:
        """Run kubectl inside the container and return its output."""
        exit_code, output = self.exec(["kubectl", *args])
        if exit_code != 0:
            raise RuntimeError(f"kubectl {' '.join(args)} failed: {output.decode()}")
        return output.decode("utf-8").strip()

    def get_api_url(self) -> str:
        """API server URL reachable from the host."""
        host = self.get_container_host_ip()
        port = self.get_exposed_port(self.K8S_API_PORT)
        return f"https://{host}:{port}"

    def get_ca_certificate(self) -> bytes:
        """Extract the cluster CA certificate from the container's kubeconfig."""
        config = yaml.safe_load(self.kubectl("config", "view", "--raw"))
        cluster = config["clusters"][0]["cluster"]
        return base64.b64decode(cluster["certificate-authority-data"])

    def create_service_account_token(self, name: str = SERVICE_ACCOUNT) -> str:
        """Create a cluster-admin service account and return a bearer token for it."""
        self.kubectl("create", "serviceaccount", name, "--namespace", "default")
        self.kubectl(
            "create",
            "clusterrolebinding",
            name,
            "--clusterrole=cluster-admin",
            f"--serviceaccount=default:{name}",
        )
        return self.kubectl("create", "token", name, "--namespace", "default", "--duration=2h")


# ============================================================================
# K3S Cluster Fixtures (Session-Scoped)
# ============================================================================


@pytest.fixture(scope="session")
def k3s_container() -> Generator[K3SContainer]:
    """Session-scoped K3S container shared by all integration modules."""
    if not _docker_available():
        pytest.skip("Docker not available -- skipping Kubernetes integration tests")

    container = K3SContainer()

    with container:
        wait_for_logs(container, "Node controller sync successful", timeout=120)
        # Give a short buffer for API server to stabilize
        time.sleep(2)
        yield container


@pytest.fixture(scope="session")
def connection_config(
    k3s_container: K3SContainer,
    tmp_path_factory: pytest.TempPathFactory,
) -> ClusterConnectionConfig:
    """Connection settings for the K3S cluster using a service account token."""
    ca_path: Path = tmp_path_factory.mktemp("k3s") / "ca.crt"
    ca_path.write_bytes(k3s_container.get_ca_certificate())

    return ClusterConnectionConfig(
        api_url=k3s_container.get_api_url(),
        token=k3s_container.create_service_account_token(),
        ca_cert_file=str(ca_path),
    )


@pytest.fixture(scope="session")
def k8s_client(connection_config: ClusterConnectionConfig) -> Generator[KubernetesClient]:
    """Session-scoped KubernetesClient for fixture housekeeping."""
    client = KubernetesClient(connection_config)
    yield client
    client.close()


# ============================================================================
# Namespace Isolation Fixtures
# ============================================================================


@pytest.fixture(scope="module")
def test_namespace(k8s_client: KubernetesClient) -> Generator[str]:
    """Module-scoped unique namespace for test isolation.

    Deleting the namespace on teardown cascades to all resources within it.
    """
    ns_name = f"inttest-{uuid.uuid4().hex[:8]}"
    k8s_client.core_v1.create_namespace(
        body={
            "apiVersion": "v1",
            "kind": "Namespace",
            "metadata": {"name": ns_name},
        }
    )

    for _ in range(30):
        ns = k8s_client.core_v1.read_namespace(name=ns_name)
        if ns.status.phase == "Active":
            break
        time.sleep(0.5)

    yield ns_name

    with contextlib.suppress(Exception):
        k8s_client.core_v1.delete_namespace(name=ns_name)


@pytest.fixture
def unique_name() -> str:
    """Generate a unique resource name for test isolation."""
    return f"test-{uuid.uuid4().hex[:8]}"


# ============================================================================
# Facade Fixtures
# ============================================================================


@pytest.fixture
def facade(
    connection_config: ClusterConnectionConfig,
    test_namespace: str,
) -> KubernetesApiClientFacade:
    """Facade bound to the module's namespace."""
    return GenericClientFacadeFactory().create_cluster_client(
        api_url=connection_config.api_url,
        token=connection_config.token,
        ca_cert_file=connection_config.ca_cert_file,
        namespace=test_namespace,
    )
