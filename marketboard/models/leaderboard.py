"""Leaderboard models for the aggregation pipeline and API responses."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .trade import UserId
from .user import UserProfile


class UserAggregate(BaseModel):
    """
    Running per-user totals built in one pass over the fetched trades.
    """
    user_id: UserId
    total_volume: float = Field(default=0.0, description="Sum of amount staked")
    trade_count: int = Field(default=0, description="Number of trades included")


class LeaderboardEntry(BaseModel):
    """
    A single, display-ready entry in the leaderboard.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    rank: int = Field(ge=1, description="1-based position")
    user_id: UserId
    username: str
    total_volume: float = 0.0
    trade_count: int = 0
    total_points: float = 0.0
    win_rate: float = 0.0
    current_streak: int = 0
    wallet_address: Optional[str] = None

    @classmethod
    def from_profile(
        cls,
        rank: int,
        aggregate: UserAggregate,
        profile: UserProfile,
    ) -> "LeaderboardEntry":
        return cls(
            rank=rank,
            user_id=aggregate.user_id,
            username=profile.username or placeholder_username(aggregate.user_id),
            total_volume=aggregate.total_volume,
            trade_count=aggregate.trade_count,
            total_points=profile.total_points,
            win_rate=profile.win_rate,
            current_streak=profile.current_streak,
            wallet_address=profile.wallet_address,
        )

    @classmethod
    def placeholder(cls, rank: int, aggregate: UserAggregate) -> "LeaderboardEntry":
        """Entry for a user whose identity lookup failed."""
        return cls(
            rank=rank,
            user_id=aggregate.user_id,
            username=placeholder_username(aggregate.user_id),
            total_volume=aggregate.total_volume,
            trade_count=aggregate.trade_count,
        )


def placeholder_username(user_id: UserId) -> str:
    return f"User {user_id}"


class LeaderboardStatus(str, Enum):
    """Outcome of a leaderboard run."""
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class LeaderboardResult(BaseModel):
    """
    Ranked leaderboard plus what is known about how it was produced.

    ``status`` separates "no trades" (empty) from "nothing could be
    fetched" (failed). ``complete`` is False when pagination stopped early
    at an error or a safety ceiling.
    """
    timeframe: str
    status: LeaderboardStatus
    entries: list[LeaderboardEntry] = Field(default_factory=list)
    trades_scanned: int = 0
    complete: bool = True
    error: Optional[str] = None


class AnalyticsPage(BaseModel):
    """One page of a server-side weekly/monthly leaderboard."""
    results: list[dict] = Field(default_factory=list)
    next_cursor: Optional[str] = None
