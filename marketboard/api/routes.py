"""API routes for the leaderboard service."""

from typing import Literal, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from marketboard.config import Config
from marketboard.datasources import DataSource
from marketboard.errors import APIError, NotFoundError
from marketboard.models import (
    AnalyticsPage,
    DailyRevenue,
    DailyTradeStats,
    LeaderboardResult,
)
from marketboard.services import (
    LeaderboardService,
    LeaderboardTimeframe,
    TradeService,
)
from .dependencies import get_config, get_datasource

router = APIRouter(prefix="/v1")


@router.get("/leaderboard", response_model=LeaderboardResult)
async def get_leaderboard(
    timeframe: LeaderboardTimeframe = Query(
        LeaderboardTimeframe.ALL,
        description="Ranking window: all, weekly or monthly",
        examples=["all"],
    ),
    limit: Optional[int] = Query(
        None,
        ge=1,
        le=1000,
        description="Number of entries (defaults to LEADERBOARD_LIMIT)",
        examples=[50],
    ),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> LeaderboardResult:
    """
    Get the leaderboard ranked by trading volume.

    Returns: timeframe, status (ok/empty/failed), entries[], trades_scanned, complete
    """
    service = LeaderboardService(datasource, config)
    return await service.get_leaderboard(timeframe=timeframe, limit=limit)


@router.get("/leaderboard/{period}", response_model=AnalyticsPage)
async def get_leaderboard_page(
    period: Literal["weekly", "monthly"] = Path(
        ...,
        description="Server-side leaderboard window",
    ),
    cursor: Optional[str] = Query(
        None,
        description="Continuation cursor from a previous page",
    ),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> AnalyticsPage:
    """
    Get one raw page of the weekly or monthly leaderboard.

    Returns: results[], next_cursor
    """
    service = LeaderboardService(datasource, config)
    return await service.get_analytics_page(period, cursor)


@router.get("/users/{user_id}/rank")
async def get_user_rank(
    user_id: str = Path(..., description="Backend user id", examples=["42"]),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> dict:
    """Get a user's rank summary as reported by the backend."""
    service = LeaderboardService(datasource, config)
    try:
        return await service.get_user_rank(user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    except (APIError, httpx.HTTPError) as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/trades/over-time", response_model=list[DailyTradeStats])
async def get_trades_over_time(
    market: Optional[str] = Query(None, description="Market id filter", examples=["3"]),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> list[DailyTradeStats]:
    """
    Get trade count and volume per day.

    Returns: date, count, volume
    """
    params = {"market": market} if market else None
    service = TradeService(datasource, config)
    return await service.get_trades_over_time(params)


@router.get("/trades/revenue", response_model=list[DailyRevenue])
async def get_revenue_flow(
    market: Optional[str] = Query(None, description="Market id filter", examples=["3"]),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> list[DailyRevenue]:
    """
    Get fee revenue per day.

    Returns: date, revenue
    """
    params = {"market": market} if market else None
    service = TradeService(datasource, config)
    return await service.get_revenue_flow(params)
