"""Resource client for PersistentVolumeClaims."""

from __future__ import annotations

from kubernetes.client import V1PersistentVolumeClaim

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient


class PersistentVolumeClaimsApiClient(BaseNamespaceApiClient):
    """Client for namespaced PersistentVolumeClaims."""

    model = V1PersistentVolumeClaim
    _entity_name = "PersistentVolumeClaim"
    _resource = "persistent_volume_claim"
