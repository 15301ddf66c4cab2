"""Shared fixtures for the marketboard tests."""

import asyncio
from typing import Any, Optional

import pytest

from marketboard.config import Config
from marketboard.datasources import DataSource
from marketboard.errors import NotFoundError
from marketboard.models import UserProfile, normalize_response


class FakeDataSource(DataSource):
    """
    In-memory data source.

    ``pages`` maps endpoint -> list of raw page payloads (or exceptions to
    raise); ``users`` maps user id -> profile dict (or exception).
    """

    def __init__(
        self,
        pages: Optional[dict[str, list[Any]]] = None,
        users: Optional[dict[Any, Any]] = None,
        analytics: Optional[dict[str, dict[Optional[str], Any]]] = None,
        user_delay: float = 0.0,
    ):
        self.pages = pages or {}
        self.users = users or {}
        self.analytics = analytics or {}
        self.user_delay = user_delay
        self.page_calls: list[tuple[str, int, int, Optional[dict]]] = []
        self.user_calls: list[Any] = []
        self.closed = False

    async def get_page(self, endpoint, page, page_size, params=None):
        self.page_calls.append((endpoint, page, page_size, params))
        payloads = self.pages.get(endpoint, [])
        if page > len(payloads):
            return normalize_response({"results": [], "next": None})
        payload = payloads[page - 1]
        if isinstance(payload, Exception):
            raise payload
        return normalize_response(payload)

    async def get_user(self, user_id):
        self.user_calls.append(user_id)
        if self.user_delay:
            await asyncio.sleep(self.user_delay)
        profile = self.users.get(user_id)
        if profile is None:
            raise NotFoundError(f"GET /users/{user_id}/ -> 404", 404, f"/users/{user_id}/")
        if isinstance(profile, Exception):
            raise profile
        return UserProfile.model_validate(profile)

    async def get_analytics(self, period, cursor=None):
        payload = self.analytics.get(period, {}).get(cursor)
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def get_user_rank(self, user_id):
        if str(user_id) not in {str(k) for k in self.users}:
            raise NotFoundError("not found", 404, f"/analytics/user/{user_id}/")
        return {"user_id": user_id, "rank": 1}

    async def close(self):
        self.closed = True


def paged(items: list[Any], page_size: int) -> list[dict]:
    """Split items into paginated envelopes with next links."""
    chunks = [items[i:i + page_size] for i in range(0, len(items), page_size)] or [[]]
    pages = []
    for number, chunk in enumerate(chunks, start=1):
        has_next = number < len(chunks)
        pages.append({
            "count": len(items),
            "next": f"http://api.test/api/trades/?page={number + 1}" if has_next else None,
            "previous": None,
            "results": chunk,
        })
    return pages


@pytest.fixture
def config() -> Config:
    return Config(
        api_url="http://api.test/api",
        retry_delay=0.0,
        leaderboard_limit=50,
    )
