"""Pagination utilities for fetching complete result sets."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx

from marketboard.datasources import DataSource
from marketboard.models import Page, PaginationResult

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGES = 1000

PageFetcher = Callable[[int, int], Awaitable[Page]]


async def collect_pages(
    fetch_page: PageFetcher,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = MAX_PAGES,
    max_items: Optional[int] = None,
) -> PaginationResult:
    """
    Walk a page-numbered endpoint until it runs out of pages.

    Pages are requested one at a time starting at page 1. The walk stops
    when a page has no ``next`` link, after ``max_pages`` pages, once
    ``max_items`` items are collected, or at the first failing page.
    Items gathered before a failure are kept.

    Args:
        fetch_page: Async callable (page_number, page_size) -> Page
        page_size: Items per page
        max_pages: Safety ceiling on the number of requests
        max_items: Optional cap on the number of items returned

    Returns:
        PaginationResult with the items in server order
    """
    result = PaginationResult()
    current_page = 1

    while True:
        if current_page > max_pages:
            logger.warning(f"Pagination limit reached ({max_pages} pages). Stopping.")
            result.truncated = True
            break

        try:
            page = await fetch_page(current_page, page_size)
        except Exception as e:
            logger.error(f"Error fetching page {current_page}: {e}")
            result.error = e
            break

        result.items.extend(page.items)
        result.pages_fetched += 1

        if max_items is not None and len(result.items) >= max_items:
            if len(result.items) > max_items or page.next:
                logger.warning(f"Item limit reached ({max_items} items). Stopping.")
                result.truncated = True
            del result.items[max_items:]
            break

        if not page.next:
            break
        current_page += 1

    return result


async def fetch_all_pages(
    fetch_page: PageFetcher,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = MAX_PAGES,
    max_items: Optional[int] = None,
) -> list[Any]:
    """
    Fetch all pages of paginated data.

    Never raises for a failing page; see collect_pages for the stop rules.
    """
    result = await collect_pages(
        fetch_page,
        page_size=page_size,
        max_pages=max_pages,
        max_items=max_items,
    )
    return result.items


def endpoint_fetcher(
    datasource: DataSource,
    endpoint: str,
    params: Optional[dict[str, Any]] = None,
) -> PageFetcher:
    """Bind a datasource endpoint and its filters into a PageFetcher."""
    async def fetch_page(page: int, page_size: int) -> Page:
        return await datasource.get_page(endpoint, page, page_size, params)

    return fetch_page


async def fetch_all_from_endpoint(
    datasource: DataSource,
    endpoint: str,
    params: Optional[dict[str, Any]] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = MAX_PAGES,
    max_items: Optional[int] = None,
) -> list[Any]:
    """
    Fetch all items from a paginated API endpoint.

    Args:
        datasource: Data source to read from
        endpoint: Endpoint path (without query params)
        params: Additional query parameters
        page_size: Items per page

    Returns:
        All items from all pages
    """
    return await fetch_all_pages(
        endpoint_fetcher(datasource, endpoint, params),
        page_size=page_size,
        max_pages=max_pages,
        max_items=max_items,
    )


def extract_cursor(next_url: Optional[str]) -> Optional[str]:
    """Read the ``cursor`` query parameter from a ``next`` link."""
    if not next_url:
        return None
    try:
        url = httpx.URL(next_url)
    except (httpx.InvalidURL, TypeError):
        return None
    return url.params.get("cursor") or None
