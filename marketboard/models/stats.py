"""Per-day trade statistics for admin charts."""

from pydantic import BaseModel, Field


class DailyTradeStats(BaseModel):
    date: str = Field(description="YYYY-MM-DD, or 'unknown'")
    count: int = 0
    volume: float = 0.0


class DailyRevenue(BaseModel):
    date: str = Field(description="YYYY-MM-DD, or 'unknown'")
    revenue: float = 0.0
