from .trade import Trade, UserId, parse_numeric, resolve_id
from .user import UserProfile
from .pagination import (
    Page,
    PaginatedPage,
    ListPage,
    SinglePage,
    PaginationResult,
    normalize_response,
)
from .leaderboard import (
    UserAggregate,
    LeaderboardEntry,
    LeaderboardStatus,
    LeaderboardResult,
    AnalyticsPage,
    placeholder_username,
)
from .stats import DailyTradeStats, DailyRevenue

__all__ = [
    "Trade",
    "UserId",
    "parse_numeric",
    "resolve_id",
    "UserProfile",
    "Page",
    "PaginatedPage",
    "ListPage",
    "SinglePage",
    "PaginationResult",
    "normalize_response",
    "UserAggregate",
    "LeaderboardEntry",
    "LeaderboardStatus",
    "LeaderboardResult",
    "AnalyticsPage",
    "placeholder_username",
    "DailyTradeStats",
    "DailyRevenue",
]
