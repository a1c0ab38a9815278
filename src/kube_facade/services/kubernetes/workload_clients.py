"""Resource client for Pods."""

from __future__ import annotations

from kubernetes.client import V1Pod

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient, Query, to_api_kwargs


class PodsApiClient(BaseNamespaceApiClient):
    """Client for namespaced Pods.

    Besides the shared CRUD contract, exposes log reading, which has no
    counterpart on other resource kinds.
    """

    model = V1Pod
    _entity_name = "Pod"
    _resource = "pod"

    def read_log(self, name: str, query: Query | None = None) -> str:
        """Read logs of a pod.

        Args:
            name: Pod name.
            query: Log options (container, tailLines, sinceSeconds, ...).

        Returns:
            Log output as a string.
        """
        self._log.debug("reading_pod_log", name=name)
        result: str = self._client.request(
            self._client.core_v1.read_namespaced_pod_log,
            name=name,
            namespace=self._namespace,
            resource_type=self._entity_name,
            resource_name=name,
            **to_api_kwargs(query),
        )
        return result
