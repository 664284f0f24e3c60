"""Helpers for page-number paginated endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
import re
from typing import Generic, TypeVar

from lumnisai.constants import DEFAULT_LIMIT
from lumnisai.errors import ConfigurationError

T = TypeVar("T")

_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of results as returned by a page fetcher."""

    data: list[T] = field(default_factory=list)
    total: int = 0
    has_next: bool = False
    has_prev: bool = False
    page: int | None = None
    page_size: int | None = None


PageFetcher = Callable[[int, int], Awaitable[PagedResult[T]]]


async def paginate(
    fetch: PageFetcher[T],
    *,
    page_size: int = DEFAULT_LIMIT,
    max_pages: int | None = None,
) -> AsyncIterator[T]:
    """Yield every item across pages, starting at page 1.

    Args:
        fetch: Called as ``fetch(page, page_size)``.
        page_size: Items requested per page.
        max_pages: Stop after this many pages even if more exist.
    """
    if page_size < 1:
        raise ConfigurationError(f"page_size must be >= 1, got {page_size}")

    page = 1
    has_more = True
    while has_more and (max_pages is None or page <= max_pages):
        result = await fetch(page, page_size)
        for item in result.data:
            yield item
        has_more = result.has_next
        page += 1


async def collect_all_pages(
    fetch: PageFetcher[T],
    *,
    page_size: int = DEFAULT_LIMIT,
    max_pages: int | None = None,
) -> list[T]:
    """Collect the items of every page into one list."""
    return [
        item
        async for item in paginate(fetch, page_size=page_size, max_pages=max_pages)
    ]


def parse_link_header(link_header: str | None) -> dict[str, str]:
    """Parse an RFC 8288 ``Link`` header into ``{rel: url}``."""
    if not link_header:
        return {}
    links: dict[str, str] = {}
    for part in link_header.split(","):
        match = _LINK_RE.search(part)
        if match:
            links[match.group(2)] = match.group(1)
    return links
