"""Tests for the REST data source against a mocked transport."""

import asyncio

import httpx
import pytest

from marketboard.auth import AuthSession
from marketboard.datasources import RestDataSource
from marketboard.errors import APIError, AuthenticationError, NotFoundError, RateLimitError
from marketboard.models import ListPage, PaginatedPage
from marketboard.services import LeaderboardService


def make_source(handler, config, session=None):
    return RestDataSource.from_config(
        config,
        session=session,
        transport=httpx.MockTransport(handler),
    )


def run_and_close(source, coro):
    async def runner():
        try:
            return await coro
        finally:
            await source.close()
    return asyncio.run(runner())


class TestRequests:

    def test_page_request_params_and_auth(self, config):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"count": 1, "next": None, "results": [{"id": 1}]})

        source = make_source(handler, config, session=AuthSession(token="secret"))
        page = run_and_close(source, source.get_page("/trades/", 2, 1000, {"market": 5}))

        assert isinstance(page, PaginatedPage)
        assert page.items == [{"id": 1}]
        request = seen[0]
        assert request.url.path == "/api/trades/"
        assert request.url.params["page"] == "2"
        assert request.url.params["page_size"] == "1000"
        assert request.url.params["market"] == "5"
        assert request.headers["Authorization"] == "Bearer secret"

    def test_anonymous_session_sends_no_token(self, config):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        source = make_source(handler, config)
        page = run_and_close(source, source.get_page("/trades/", 1, 100))

        assert isinstance(page, ListPage)
        assert "Authorization" not in seen[0].headers

    def test_logout_drops_token_for_later_requests(self, config):
        seen = []

        def handler(request):
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={"username": "alice"})

        session = AuthSession(token="secret")
        source = make_source(handler, config, session=session)

        async def two_calls():
            await source.get_user(1)
            session.logout()
            await source.get_user(1)

        run_and_close(source, two_calls())

        assert seen == ["Bearer secret", None]

    def test_config_token_seeds_session(self, config):
        config.api_token = "from-env"
        source = make_source(lambda request: httpx.Response(200, json={}), config)

        assert source.session.headers() == {"Authorization": "Bearer from-env"}


class TestRateLimit:

    def test_retries_429_then_succeeds(self, config):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(429, json={"detail": "slow down"})
            return httpx.Response(200, json={"username": "alice", "total_points": "3"})

        source = make_source(handler, config)
        user = run_and_close(source, source.get_user(1))

        assert user.username == "alice"
        assert len(calls) == 3

    def test_gives_up_after_max_retries(self, config):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429, json={"detail": "slow down"})

        source = make_source(handler, config)
        with pytest.raises(RateLimitError) as excinfo:
            run_and_close(source, source.get_user(1))

        assert len(calls) == config.max_retries + 1
        assert excinfo.value.status_code == 429
        assert "slow down" in str(excinfo.value)

    def test_backoff_doubles(self, config, monkeypatch):
        config.retry_delay = 1.0
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr("marketboard.datasources.rest.asyncio.sleep", fake_sleep)
        source = make_source(lambda request: httpx.Response(429), config)

        with pytest.raises(RateLimitError):
            run_and_close(source, source.get_user(1))

        assert delays == [1.0, 2.0]


class TestErrors:

    @pytest.mark.parametrize("status, error", [
        (404, NotFoundError),
        (401, AuthenticationError),
        (403, AuthenticationError),
        (500, APIError),
    ])
    def test_status_maps_to_error(self, config, status, error):
        source = make_source(lambda request: httpx.Response(status, json={"detail": "nope"}), config)

        with pytest.raises(error) as excinfo:
            run_and_close(source, source.get_user(7))

        assert excinfo.value.status_code == status
        assert excinfo.value.path == "/users/7/"

    def test_invalid_json(self, config):
        source = make_source(lambda request: httpx.Response(200, text="<html>"), config)

        with pytest.raises(APIError):
            run_and_close(source, source.get_user(7))

    def test_analytics_cursor_param(self, config):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json={"next": None, "results": []})

        source = make_source(handler, config)
        run_and_close(source, source.get_analytics("weekly", "abc"))

        assert seen[0].path == "/api/analytics/weekly/"
        assert seen[0].params["cursor"] == "abc"


def test_pipeline_over_http(config):
    """End to end: two pages of trades, one failing profile lookup."""
    config.trades_page_size = 2
    trades = [
        {"id": 1, "user": 1, "amount_staked": "10.00"},
        {"id": 2, "user": 2, "amount_staked": "20.00"},
        {"id": 3, "user_id": 1, "amount": "15.00"},
    ]

    def handler(request):
        path = request.url.path
        if path == "/api/trades/":
            page = int(request.url.params["page"])
            if page == 1:
                return httpx.Response(200, json={
                    "count": 3,
                    "next": "http://api.test/api/trades/?page=2",
                    "results": trades[:2],
                })
            return httpx.Response(200, json={"count": 3, "next": None, "results": trades[2:]})
        if path == "/api/users/1/":
            return httpx.Response(200, json={"username": "alice", "win_rate": "55.5", "current_streak": 4})
        return httpx.Response(404, json={"detail": "Not found."})

    source = make_source(handler, config)
    service = LeaderboardService(source, config)
    result = run_and_close(source, service.get_all_time_leaderboard())

    assert [(e.rank, e.user_id, e.username, e.total_volume) for e in result.entries] == [
        (1, 1, "alice", 25.0),
        (2, 2, "User 2", 20.0),
    ]
    assert result.entries[0].win_rate == 55.5
    assert result.entries[0].current_streak == 4
    assert result.trades_scanned == 3
