"""Cursor over paged list results."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from kube_facade.services.kubernetes.base import BaseNamespaceApiClient, Query

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 100


class ResourceCursor(Iterator[Any]):
    """Forward-only iterator over every resource matching a query.

    Pages are fetched lazily: nothing is requested until the first item is
    pulled, and the next page only once the current one is used up. The
    cursor follows the server's continuation token and stops at the first
    page without one. To start over, create a new cursor.

    Example:
        >>> cursor = ResourceCursor(pods_client, {"labelSelector": "app=web"})
        >>> names = [pod.metadata.name for pod in cursor]
    """

    def __init__(self, api_client: BaseNamespaceApiClient, query: Query | None = None) -> None:
        """Initialize the cursor.

        Args:
            api_client: Resource client to list through.
            query: Filter for every page; an explicit ``limit`` sets the
                page size (default 100).
        """
        self._api_client = api_client
        self._query = dict(query or {})
        self._limit = self._query.pop("limit", DEFAULT_PAGE_SIZE)
        self._query.pop("continue", None)
        self._continue_token: str | None = None
        self._buffer: deque[Any] = deque()
        self._exhausted = False
        self.pages_fetched = 0

    def __iter__(self) -> ResourceCursor:
        return self

    def __next__(self) -> Any:
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._fetch_page()
        return self._buffer.popleft()

    def _fetch_page(self) -> None:
        page_query: dict[str, Any] = {**self._query, "limit": self._limit}
        if self._continue_token:
            page_query["continue"] = self._continue_token

        result = self._api_client.list(page_query)
        self.pages_fetched += 1

        items = result.items or []
        self._buffer.extend(items)

        token = getattr(result.metadata, "_continue", None) if result.metadata else None
        self._continue_token = token or None
        self._exhausted = not token
        logger.debug(
            "fetched_page",
            page=self.pages_fetched,
            count=len(items),
            has_more=not self._exhausted,
        )
