"""User profile model for /users/{id}/ responses."""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .trade import parse_numeric


class UserProfile(BaseModel):
    """Identity and stats for one user, as much as the backend returns."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    username: Optional[str] = None
    total_points: float = 0.0
    win_rate: float = 0.0
    current_streak: int = Field(default=0, description="Falls back to 'streak' when absent")
    wallet_address: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = dict(data)
        username = data.get("username")
        normalized["username"] = str(username) if username not in (None, "") else None
        normalized["total_points"] = parse_numeric(data.get("total_points"))
        normalized["win_rate"] = parse_numeric(data.get("win_rate"))
        streak = data.get("current_streak")
        if streak is None:
            streak = data.get("streak")
        normalized["current_streak"] = int(parse_numeric(streak))
        wallet = data.get("wallet_address")
        normalized["wallet_address"] = str(wallet) if wallet else None
        return normalized
