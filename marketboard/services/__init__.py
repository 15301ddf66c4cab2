from .trade_service import TradeService
from marketboard.services.leaderboard_service import LeaderboardService, LeaderboardTimeframe
from marketboard.services.leaderboard_loader import LeaderboardLoader
from .cancellation import CancellationToken, OperationCancelled

__all__ = [
    "TradeService",
    "LeaderboardService",
    "LeaderboardTimeframe",
    "LeaderboardLoader",
    "CancellationToken",
    "OperationCancelled",
]
