"""Trade model for records returned by the /trades/ endpoint."""

import math
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

UserId = Union[int, str]


def parse_numeric(value: Any) -> float:
    """
    Coerce an API number (often a decimal string) to float.

    Anything that does not parse to a finite number becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return result if math.isfinite(result) else 0.0


def resolve_id(value: Any) -> Optional[UserId]:
    """Normalize an id reference (id, string, or nested {"id": ...} object)."""
    if isinstance(value, Mapping):
        value = value.get("id")
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        # "1" and 1 name the same user
        if value.isascii() and value.isdigit():
            return int(value)
        return value or None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return str(value)


def _first_present(data: Mapping, *keys: str) -> Any:
    """Value of the first key that is present and not None/empty."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


class Trade(BaseModel):
    """
    A single trade as served by the backend.

    Records are heterogeneous: the owner may appear under ``user`` or
    ``user_id`` and the stake under ``amount_staked`` or ``amount``.
    Normalization happens here so the aggregation code only sees one shape.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[UserId] = None
    user_id: Optional[UserId] = Field(default=None, description="Owner of the trade, None if unresolvable")
    amount_staked: float = Field(default=0.0, description="Stake, 0.0 when missing or unparseable")
    fee: float = Field(default=0.0, description="Fee or commission charged")
    created_at: Optional[str] = Field(default=None, description="ISO-8601 timestamp")
    market_id: Optional[UserId] = None
    outcome_type: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = dict(data)
        normalized["id"] = resolve_id(data.get("id"))
        normalized["user_id"] = resolve_id(_first_present(data, "user", "user_id"))
        normalized["amount_staked"] = parse_numeric(_first_present(data, "amount_staked", "amount"))
        normalized["fee"] = parse_numeric(_first_present(data, "fee", "commission"))
        normalized["market_id"] = resolve_id(_first_present(data, "market_id", "market"))

        created_at = data.get("created_at")
        normalized["created_at"] = None if created_at is None else str(created_at)
        outcome = data.get("outcome_type")
        normalized["outcome_type"] = None if outcome is None else str(outcome)
        return normalized

    @property
    def has_user(self) -> bool:
        return self.user_id is not None
