"""Cursor pagination shared by every list endpoint."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

from bgcheck.core.fetcher import fetch_json

T = TypeVar("T")


@dataclass
class PageCollection(Generic[T]):
    """Items gathered across pages, in page order."""

    items: list[T] = field(default_factory=list)
    complete: bool = True
    total: int | None = None
    pages: int = 0
    error: str | None = None


async def collect_pages(
    client: httpx.AsyncClient,
    url: str,
    normalize: Callable[[dict], T | None],
    *,
    limit: int | None = None,
    sort_order: str | None = None,
    max_pages: int = 100,
) -> PageCollection[T]:
    """
    Follow ``nextPageCursor`` until the upstream stops returning one.

    A failed page ends the walk and marks the collection incomplete; items
    from earlier pages are kept.

    Args:
        client: Shared AsyncClient
        url: List endpoint URL
        normalize: Maps one raw record to an entry, or None to skip it
        limit: Page size sent as ``limit``
        sort_order: Sent as ``sortOrder`` when given
        max_pages: Upper bound on requests for one collection

    Returns:
        PageCollection with items, completeness and the reported total
    """
    collection: PageCollection[T] = PageCollection()
    cursor: str | None = None
    seen_cursors: set[str] = set()

    while True:
        if collection.pages >= max_pages:
            collection.complete = False
            collection.error = f"Stopped after {max_pages} pages"
            break

        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if sort_order:
            params["sortOrder"] = sort_order
        if cursor:
            params["cursor"] = cursor

        result = await fetch_json(client, url, params)
        if not result.success:
            collection.complete = False
            collection.error = result.error
            break

        payload = result.data
        if not isinstance(payload, dict):
            collection.complete = False
            collection.error = "Malformed page"
            break

        records = payload.get("data") or []
        if not isinstance(records, list):
            collection.complete = False
            collection.error = "Malformed page"
            break

        for raw in records:
            if not isinstance(raw, dict):
                continue
            entry = normalize(raw)
            if entry is not None:
                collection.items.append(entry)
        collection.pages += 1

        total = payload.get("total")
        if isinstance(total, int) and not isinstance(total, bool) and total >= 0:
            collection.total = total

        cursor = payload.get("nextPageCursor")
        if not cursor:
            break
        if not isinstance(cursor, str):
            collection.complete = False
            collection.error = "Malformed page"
            break
        if cursor in seen_cursors:
            collection.complete = False
            collection.error = "Repeated cursor"
            break
        seen_cursors.add(cursor)

    return collection
