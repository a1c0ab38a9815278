"""Unit tests for ResourceCursor."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from kubernetes.client import V1ListMeta, V1ObjectMeta, V1Pod, V1PodList

from kube_facade.services.kubernetes.pagination import DEFAULT_PAGE_SIZE, ResourceCursor


def _page(names: list[str], token: str | None = None) -> V1PodList:
    return V1PodList(
        items=[V1Pod(metadata=V1ObjectMeta(name=name)) for name in names],
        metadata=V1ListMeta(_continue=token),
    )


@pytest.fixture
def pods_client() -> MagicMock:
    """Mock pods client returning two pages."""
    client = MagicMock()
    client.list.side_effect = [_page(["a", "b"], "foo"), _page(["c"])]
    return client


@pytest.mark.unit
@pytest.mark.kubernetes
class TestResourceCursor:
    """Tests for ResourceCursor."""

    def test_iterates_across_pages(self, pods_client: MagicMock) -> None:
        """Should yield items of every page in server order."""
        cursor = ResourceCursor(pods_client, {"labelSelector": "app=my"})

        assert [pod.metadata.name for pod in cursor] == ["a", "b", "c"]
        assert cursor.pages_fetched == 2

    def test_page_queries(self, pods_client: MagicMock) -> None:
        """Should request the default page size and follow the continue token."""
        list(ResourceCursor(pods_client, {"labelSelector": "app=my"}))

        assert [call.args[0] for call in pods_client.list.call_args_list] == [
            {"labelSelector": "app=my", "limit": DEFAULT_PAGE_SIZE},
            {"labelSelector": "app=my", "limit": DEFAULT_PAGE_SIZE, "continue": "foo"},
        ]

    def test_explicit_limit(self, pods_client: MagicMock) -> None:
        """Should use the caller's limit as page size."""
        list(ResourceCursor(pods_client, {"labelSelector": "app=my", "limit": 5}))

        assert all(call.args[0]["limit"] == 5 for call in pods_client.list.call_args_list)

    def test_ignores_initial_continue(self, pods_client: MagicMock) -> None:
        """Should always start from the first page."""
        list(ResourceCursor(pods_client, {"continue": "stale"}))

        assert "continue" not in pods_client.list.call_args_list[0].args[0]

    def test_does_not_mutate_query(self, pods_client: MagicMock) -> None:
        """Should leave the caller's query untouched."""
        query = {"labelSelector": "app=my", "limit": 5}

        list(ResourceCursor(pods_client, query))

        assert query == {"labelSelector": "app=my", "limit": 5}

    def test_lazy(self, pods_client: MagicMock) -> None:
        """Should not request anything before the first item is pulled."""
        cursor = ResourceCursor(pods_client)

        pods_client.list.assert_not_called()

        next(cursor)
        next(cursor)
        assert pods_client.list.call_count == 1

        next(cursor)
        assert pods_client.list.call_count == 2

    def test_exhausted(self, pods_client: MagicMock) -> None:
        """Should stay exhausted after the last page."""
        cursor = ResourceCursor(pods_client)
        list(cursor)

        with pytest.raises(StopIteration):
            next(cursor)
        assert pods_client.list.call_count == 2

    def test_empty_token_ends_iteration(self) -> None:
        """Should treat an empty continue token as the last page."""
        client = MagicMock()
        client.list.return_value = _page(["a"], "")

        assert len(list(ResourceCursor(client))) == 1
        client.list.assert_called_once()

    def test_empty_pages_with_token(self) -> None:
        """Should keep following tokens across empty pages."""
        client = MagicMock()
        client.list.side_effect = [_page([], "next"), _page(["a"])]

        assert [pod.metadata.name for pod in ResourceCursor(client)] == ["a"]

    def test_iter_returns_self(self, pods_client: MagicMock) -> None:
        """Should be its own iterator."""
        cursor = ResourceCursor(pods_client)

        assert iter(cursor) is cursor
