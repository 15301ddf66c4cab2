#!/usr/bin/env python3
"""
marketboard command line
Prints leaderboards and daily trade stats from the prediction market API.

Usage:
    marketboard-cli leaderboard [--timeframe=all] [--limit=50]
    marketboard-cli trades-over-time [--market=ID] [--revenue]

Example:
    MARKETBOARD_API_URL=https://example.com/api marketboard-cli leaderboard --limit=10
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from tabulate import tabulate

from marketboard.config import Config
from marketboard.datasources import RestDataSource
from marketboard.models import (
    DailyRevenue,
    DailyTradeStats,
    LeaderboardResult,
    LeaderboardStatus,
)
from marketboard.services import LeaderboardService, LeaderboardTimeframe, TradeService


def format_amount(amount: float) -> str:
    """Format a currency amount for display"""
    return f"${amount:,.2f}"


def format_streak(streak: int) -> str:
    return f"🔥 {streak}" if streak > 0 else str(streak)


def render_leaderboard(result: LeaderboardResult) -> str:
    """Render a leaderboard result as a text table"""
    if result.status == LeaderboardStatus.FAILED:
        return f"Leaderboard unavailable: {result.error}"
    if not result.entries:
        return "No leaderboard data available yet."

    table_data = [
        [
            entry.rank,
            entry.username,
            format_amount(entry.total_volume),
            entry.trade_count,
            f"{entry.total_points:,.0f}",
            f"{entry.win_rate:g}%",
            format_streak(entry.current_streak),
        ]
        for entry in result.entries
    ]
    table = tabulate(
        table_data,
        headers=["Rank", "User", "Volume", "Trades", "Points", "Win Rate", "Streak"],
        tablefmt="grid",
    )
    if not result.complete:
        table += "\n(partial: not every trade could be fetched)"
    return table


def render_daily_stats(rows: list[DailyTradeStats]) -> str:
    if not rows:
        return "No trades found."
    return tabulate(
        [[row.date, row.count, format_amount(row.volume)] for row in rows],
        headers=["Date", "Trades", "Volume"],
        tablefmt="grid",
    )


def render_revenue(rows: list[DailyRevenue]) -> str:
    if not rows:
        return "No trades found."
    return tabulate(
        [[row.date, format_amount(row.revenue)] for row in rows],
        headers=["Date", "Revenue"],
        tablefmt="grid",
    )


async def run_leaderboard(config: Config, timeframe: str, limit: Optional[int]) -> str:
    datasource = RestDataSource.from_config(config)
    try:
        service = LeaderboardService(datasource, config)
        result = await service.get_leaderboard(LeaderboardTimeframe(timeframe), limit=limit)
    finally:
        await datasource.close()
    return render_leaderboard(result)


async def run_trades_over_time(config: Config, market: Optional[str], revenue: bool) -> str:
    datasource = RestDataSource.from_config(config)
    params = {"market": market} if market else None
    try:
        service = TradeService(datasource, config)
        if revenue:
            return render_revenue(await service.get_revenue_flow(params))
        return render_daily_stats(await service.get_trades_over_time(params))
    finally:
        await datasource.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Leaderboards and trade stats from the prediction market API"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline progress to stderr"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    leaderboard = subparsers.add_parser("leaderboard", help="Print the leaderboard")
    leaderboard.add_argument(
        "--timeframe",
        choices=[t.value for t in LeaderboardTimeframe],
        default=LeaderboardTimeframe.ALL.value,
        help="Ranking window (default: all)"
    )
    leaderboard.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of entries (default: LEADERBOARD_LIMIT or 50)"
    )

    trades = subparsers.add_parser("trades-over-time", help="Print trades per day")
    trades.add_argument(
        "--market",
        default=None,
        help="Only count trades in this market"
    )
    trades.add_argument(
        "--revenue",
        action="store_true",
        help="Show fee revenue instead of counts and volume"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = Config.from_env()
    if args.command == "leaderboard":
        if args.limit is not None and args.limit < 1:
            print(f"Error: --limit must be positive, got {args.limit}")
            return 1
        output = asyncio.run(run_leaderboard(config, args.timeframe, args.limit))
    else:
        output = asyncio.run(run_trades_over_time(config, args.market, args.revenue))

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
