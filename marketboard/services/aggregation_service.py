"""Aggregation of raw trades into per-user and per-day statistics."""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from marketboard.models import (
    DailyRevenue,
    DailyTradeStats,
    Trade,
    UserAggregate,
    UserId,
    parse_numeric,
)

logger = logging.getLogger(__name__)

UNKNOWN_DATE = "unknown"

TradeRecord = Union[Trade, Mapping[str, Any]]


def to_trade(record: Any) -> Optional[Trade]:
    """Parse a raw record into a Trade, or None if it is not a trade at all."""
    if isinstance(record, Trade):
        return record
    if not isinstance(record, Mapping):
        return None
    try:
        return Trade.model_validate(record)
    except ValidationError as e:
        logger.debug(f"Skipping malformed trade record: {e}")
        return None


def aggregate_trades(trades: Iterable[TradeRecord]) -> dict[UserId, UserAggregate]:
    """
    Fold trades into per-user volume and trade count.

    Trades without a resolvable user are skipped. Unparseable stakes count
    as zero volume but still count as a trade.

    Returns:
        dict of user_id -> UserAggregate
    """
    aggregates: dict[UserId, UserAggregate] = {}

    for record in trades:
        trade = to_trade(record)
        if trade is None or not trade.has_user:
            continue

        aggregate = aggregates.get(trade.user_id)
        if aggregate is None:
            aggregate = UserAggregate(user_id=trade.user_id)
            aggregates[trade.user_id] = aggregate

        aggregate.total_volume += trade.amount_staked
        aggregate.trade_count += 1

    return aggregates


def trade_date(created_at: Optional[str]) -> str:
    """Calendar day (YYYY-MM-DD) of an ISO-8601 timestamp."""
    if not created_at:
        return UNKNOWN_DATE
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return UNKNOWN_DATE


def _date_order(day: str) -> tuple[int, str]:
    return (1, day) if day == UNKNOWN_DATE else (0, day)


def aggregate_trades_by_date(trades: Iterable[TradeRecord]) -> list[DailyTradeStats]:
    """Count and volume of trades per day, oldest first."""
    grouped: dict[str, DailyTradeStats] = {}

    for record in trades:
        trade = to_trade(record)
        if trade is None:
            continue
        day = trade_date(trade.created_at)
        stats = grouped.setdefault(day, DailyTradeStats(date=day))
        stats.count += 1
        stats.volume += trade.amount_staked

    return [grouped[day] for day in sorted(grouped, key=_date_order)]


def aggregate_revenue_by_date(trades: Iterable[TradeRecord]) -> list[DailyRevenue]:
    """Fees collected per day, oldest first."""
    grouped: dict[str, DailyRevenue] = {}

    for record in trades:
        trade = to_trade(record)
        if trade is None:
            continue
        day = trade_date(trade.created_at)
        revenue = grouped.setdefault(day, DailyRevenue(date=day))
        revenue.revenue += trade.fee

    return [grouped[day] for day in sorted(grouped, key=_date_order)]


__all__ = [
    "aggregate_trades",
    "aggregate_trades_by_date",
    "aggregate_revenue_by_date",
    "parse_numeric",
    "to_trade",
    "trade_date",
]
