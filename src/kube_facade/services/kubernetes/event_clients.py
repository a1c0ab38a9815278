"""Resource client for core/v1 Events."""

from __future__ import annotations

from kubernetes.client import CoreV1Event

from kube_facade.services.kubernetes.base import BaseNamespaceApiClient


class EventsApiClient(BaseNamespaceApiClient):
    """Client for namespaced Events."""

    model = CoreV1Event
    _entity_name = "Event"
    _resource = "event"
