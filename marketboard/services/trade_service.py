"""Trade service for admin trade statistics."""

from typing import Any, Optional
import logging

from marketboard.config import Config
from marketboard.datasources import DataSource
from marketboard.models import DailyRevenue, DailyTradeStats, Trade
from .aggregation_service import (
    aggregate_revenue_by_date,
    aggregate_trades_by_date,
    to_trade,
)
from .pagination_service import fetch_all_from_endpoint

logger = logging.getLogger(__name__)

TRADES_ENDPOINT = "/trades/"


class TradeService:
    """Service for retrieving trades and charting them over time."""

    def __init__(self, datasource: DataSource, config: Optional[Config] = None):
        self.datasource = datasource
        self.config = config or Config()

    async def get_trades(self, params: Optional[dict[str, Any]] = None) -> list[Trade]:
        """
        Get every trade matching ``params``.

        Args:
            params: /trades/ filters, e.g. {"market": 3}

        Returns:
            List of normalized Trade objects in server order
        """
        records = await fetch_all_from_endpoint(
            self.datasource,
            TRADES_ENDPOINT,
            params=params,
            page_size=self.config.page_size,
            max_pages=self.config.max_pages,
        )
        trades = [t for t in (to_trade(r) for r in records) if t is not None]
        logger.info(f"Loaded {len(trades)} trades")
        return trades

    async def get_trades_over_time(self, params: Optional[dict[str, Any]] = None) -> list[DailyTradeStats]:
        """Trade count and volume per day."""
        return aggregate_trades_by_date(await self.get_trades(params))

    async def get_revenue_flow(self, params: Optional[dict[str, Any]] = None) -> list[DailyRevenue]:
        """Fee revenue per day."""
        return aggregate_revenue_by_date(await self.get_trades(params))
