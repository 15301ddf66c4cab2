"""Leaderboard service for ranking users by trading volume."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional, Union

from marketboard.config import Config
from marketboard.datasources import DataSource
from marketboard.models import (
    AnalyticsPage,
    LeaderboardEntry,
    LeaderboardResult,
    LeaderboardStatus,
    SinglePage,
    UserAggregate,
    UserId,
    UserProfile,
    normalize_response,
    parse_numeric,
    resolve_id,
)
from .aggregation_service import aggregate_trades
from .cancellation import CancellationToken, OperationCancelled
from .pagination_service import collect_pages, endpoint_fetcher, extract_cursor

logger = logging.getLogger(__name__)

TRADES_ENDPOINT = "/trades/"

# Volume columns the analytics endpoints have been seen to use
ANALYTICS_VOLUME_FIELDS = (
    "weekly_volume",
    "monthly_volume",
    "total_volume",
    "all_time_volume",
    "volume",
)


class LeaderboardTimeframe(str, Enum):
    """Available leaderboard timeframes."""
    ALL = "all"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _user_id_sort_key(user_id: UserId) -> tuple[int, int, str]:
    """Numeric ids first, in numeric order, then other ids as strings."""
    text = str(user_id)
    try:
        return (0, int(text), text)
    except ValueError:
        return (1, 0, text)


def rank_aggregates(
    aggregates: Union[Mapping[UserId, UserAggregate], Iterable[UserAggregate]],
    limit: int = 50,
) -> list[UserAggregate]:
    """
    Order aggregates by total volume, highest first, and keep the top ``limit``.

    Equal volumes are ordered by user id so the result does not depend on
    the order trades arrived in.
    """
    values = aggregates.values() if isinstance(aggregates, Mapping) else aggregates
    ordered = sorted(
        values,
        key=lambda a: (-a.total_volume, _user_id_sort_key(a.user_id)),
    )
    return ordered[:max(limit, 0)]


def entry_from_analytics(row: Mapping[str, Any], rank: int) -> Optional[LeaderboardEntry]:
    """Map a pre-aggregated analytics row to a LeaderboardEntry."""
    user_id = None
    for key in ("user_id", "user", "id"):
        user_id = resolve_id(row.get(key))
        if user_id is not None:
            break
    if user_id is None:
        return None

    volume = 0.0
    for key in ANALYTICS_VOLUME_FIELDS:
        if row.get(key) is not None:
            volume = parse_numeric(row[key])
            break

    trade_count = row.get("trade_count", row.get("total_predictions", 0))
    profile = UserProfile.model_validate(row)

    return LeaderboardEntry.from_profile(
        rank=rank,
        aggregate=UserAggregate(
            user_id=user_id,
            total_volume=volume,
            trade_count=int(parse_numeric(trade_count)),
        ),
        profile=profile,
    )


class LeaderboardService:
    """Service for generating user leaderboards."""

    def __init__(self, datasource: DataSource, config: Optional[Config] = None):
        self.datasource = datasource
        self.config = config or Config()

    async def get_leaderboard(
        self,
        timeframe: LeaderboardTimeframe = LeaderboardTimeframe.ALL,
        limit: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> LeaderboardResult:
        """
        Get the leaderboard for a timeframe.

        The all-time board is computed here from raw trades; weekly and
        monthly boards come pre-aggregated from the analytics endpoints.

        Raises:
            OperationCancelled: If cancel_token was cancelled mid-run
        """
        timeframe = LeaderboardTimeframe(timeframe)
        if timeframe == LeaderboardTimeframe.ALL:
            return await self.get_all_time_leaderboard(limit=limit, cancel_token=cancel_token)
        return await self._get_period_leaderboard(timeframe, limit=limit, cancel_token=cancel_token)

    async def get_all_time_leaderboard(
        self,
        limit: Optional[int] = None,
        params: Optional[dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> LeaderboardResult:
        """
        Build the all-time leaderboard from every trade.

        Fetch all trades, aggregate per user, rank by volume, then look up
        each ranked user's profile. Always returns a result: page failures
        give a partial board, a failure before any data gives status FAILED.

        Args:
            limit: Number of entries to keep (defaults to config)
            params: Extra /trades/ filters, e.g. {"market": 3}
            cancel_token: Checked between stages

        Returns:
            LeaderboardResult sorted by rank (1 = highest volume)
        """
        limit = self.config.leaderboard_limit if limit is None else limit
        timeframe = LeaderboardTimeframe.ALL.value

        try:
            pagination = await collect_pages(
                endpoint_fetcher(self.datasource, TRADES_ENDPOINT, params),
                page_size=self.config.trades_page_size,
                max_pages=self.config.trades_max_pages,
                max_items=self.config.trades_max_items,
            )
            if pagination.failed:
                return LeaderboardResult(
                    timeframe=timeframe,
                    status=LeaderboardStatus.FAILED,
                    complete=False,
                    error=str(pagination.error),
                )

            logger.info(f"Fetched {len(pagination.items)} trades in {pagination.pages_fetched} pages")
            _check(cancel_token)

            aggregates = aggregate_trades(pagination.items)
            ranked = rank_aggregates(aggregates, limit)
            _check(cancel_token)

            entries = await self.enrich(ranked)
            _check(cancel_token)

        except OperationCancelled:
            raise
        except Exception as e:
            logger.error(f"All-time leaderboard failed: {e}")
            return LeaderboardResult(
                timeframe=timeframe,
                status=LeaderboardStatus.FAILED,
                complete=False,
                error=str(e),
            )

        return LeaderboardResult(
            timeframe=timeframe,
            status=LeaderboardStatus.OK if entries else LeaderboardStatus.EMPTY,
            entries=entries,
            trades_scanned=len(pagination.items),
            complete=pagination.complete,
        )

    async def enrich(self, ranked: list[UserAggregate]) -> list[LeaderboardEntry]:
        """
        Attach profile data to ranked aggregates.

        All lookups run concurrently. A failed lookup yields a placeholder
        entry instead of failing the board.
        """
        results = await asyncio.gather(
            *(self.datasource.get_user(aggregate.user_id) for aggregate in ranked),
            return_exceptions=True,
        )

        entries = []
        for rank, (aggregate, profile) in enumerate(zip(ranked, results), start=1):
            if isinstance(profile, Exception):
                logger.error(f"Failed to fetch user {aggregate.user_id}: {profile}")
                entries.append(LeaderboardEntry.placeholder(rank, aggregate))
            elif isinstance(profile, BaseException):
                raise profile
            else:
                entries.append(LeaderboardEntry.from_profile(rank, aggregate, profile))
        return entries

    async def get_analytics_page(
        self,
        period: Union[LeaderboardTimeframe, str],
        cursor: Optional[str] = None,
    ) -> AnalyticsPage:
        """
        Get one page of a server-side weekly/monthly leaderboard.

        Errors are logged and give an empty page.
        """
        try:
            return await self._fetch_analytics_page(period, cursor)
        except Exception as e:
            name = period.value if isinstance(period, LeaderboardTimeframe) else period
            logger.error(f"Failed to fetch {name} leaderboard: {e}")
            return AnalyticsPage()

    async def _fetch_analytics_page(
        self,
        period: Union[LeaderboardTimeframe, str],
        cursor: Optional[str] = None,
    ) -> AnalyticsPage:
        period = LeaderboardTimeframe(period)
        if period == LeaderboardTimeframe.ALL:
            raise ValueError("the all-time leaderboard has no analytics endpoint")

        data = await self.datasource.get_analytics(period.value, cursor)
        page = normalize_response(data)
        if isinstance(page, SinglePage):
            return AnalyticsPage()
        return AnalyticsPage(
            results=[row for row in page.items if isinstance(row, Mapping)],
            next_cursor=extract_cursor(page.next),
        )

    async def _get_period_leaderboard(
        self,
        period: LeaderboardTimeframe,
        limit: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> LeaderboardResult:
        """Collect a weekly/monthly board by following cursors up to ``limit`` rows."""
        limit = self.config.leaderboard_limit if limit is None else limit
        rows: list[Mapping[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0
        complete = True

        while len(rows) < limit:
            if pages >= self.config.max_pages:
                logger.warning(f"Pagination limit reached ({self.config.max_pages} pages). Stopping.")
                complete = False
                break
            try:
                page = await self._fetch_analytics_page(period, cursor)
            except Exception as e:
                logger.error(f"Error fetching {period.value} leaderboard page {pages + 1}: {e}")
                if pages == 0:
                    return LeaderboardResult(
                        timeframe=period.value,
                        status=LeaderboardStatus.FAILED,
                        complete=False,
                        error=str(e),
                    )
                complete = False
                break

            pages += 1
            rows.extend(page.results)
            _check(cancel_token)

            if not page.next_cursor or page.next_cursor == cursor:
                break
            cursor = page.next_cursor

        entries = []
        for row in rows:
            if len(entries) >= limit:
                break
            entry = entry_from_analytics(row, rank=len(entries) + 1)
            if entry is not None:
                entries.append(entry)

        return LeaderboardResult(
            timeframe=period.value,
            status=LeaderboardStatus.OK if entries else LeaderboardStatus.EMPTY,
            entries=entries,
            complete=complete,
        )

    async def get_user_rank(self, user_id: UserId) -> dict:
        """Get the backend's rank summary for a user."""
        return await self.datasource.get_user_rank(user_id)


def _check(cancel_token: Optional[CancellationToken]) -> None:
    if cancel_token is not None:
        cancel_token.raise_if_cancelled()


__all__ = [
    "LeaderboardService",
    "LeaderboardTimeframe",
    "rank_aggregates",
    "entry_from_analytics",
]
