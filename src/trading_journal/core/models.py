"""Core domain models used across the trading journal.

``Trade`` is the only persisted entity.  Everything else here is either
reference data (``ViolationRule``) or query-only (``FilterOptions``).

Numeric fields are tolerant: missing, blank, NaN, infinite or non-numeric
prices, sizes and fees coerce to ``0.0`` instead of failing validation, so a
half-filled record from an import or an older schema still loads and the
analytics treat it as a zero.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .enums import Direction


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, str) and not value.strip():
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


# ---------------------------------------------------------------------------
# Violation rules
# ---------------------------------------------------------------------------

class ViolationRule(BaseModel):
    """A behavioural rule a trader can flag as broken on a trade."""

    model_config = {"frozen": True}

    id: str
    label: str
    is_custom: bool = False


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """A single journaled trade."""

    # Identity (assigned by the store)
    id: str = ""
    user_id: str = ""

    # Instrument
    date: dt.date = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc).date())
    symbol: str = ""
    direction: Direction = Direction.LONG

    # Price facts
    entry_price: float = 0.0
    exit_price: float = 0.0
    stop_loss: float | None = None
    take_profit: float | None = None

    # Size and cost
    lot_size: float = 0.0
    quantity: int = 1
    fees: float = 0.0

    # Cached at creation; None means "recompute"
    profit: float | None = None
    profit_percentage: float | None = None

    # Narrative
    strategy: str = ""
    setup: str = ""
    setup_description: str = ""
    notes: str = ""
    emotions: str = ""
    rating: int | None = Field(default=None, ge=1, le=5)
    time_frame: str = ""
    tags: list[str] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    violations: list[ViolationRule] = Field(default_factory=list)

    # Audit
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    is_simulated: bool = False

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, v: Any) -> str:
        return str(v or "").strip().upper()

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("entry_price", "exit_price", "lot_size", "fees", mode="before")
    @classmethod
    def _zero_if_malformed(cls, v: Any) -> float:
        result = _to_float(v)
        return 0.0 if result is None else result

    @field_validator(
        "stop_loss", "take_profit", "profit", "profit_percentage", mode="before"
    )
    @classmethod
    def _none_if_malformed(cls, v: Any) -> float | None:
        return _to_float(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _int_quantity(cls, v: Any) -> int:
        result = _to_float(v)
        return 0 if result is None else int(result)

    @field_validator("rating", mode="before")
    @classmethod
    def _unset_rating(cls, v: Any) -> Any:
        # The entry form stored 0 for "not rated"
        if v in (None, "", 0, "0"):
            return None
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_date(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v.strip()) > 10:
            return dt.datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
        return v

    @field_validator("violations", mode="before")
    @classmethod
    def _rules_from_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [
                {"id": item, "label": item} if isinstance(item, str) else item
                for item in v
            ]
        return v

    @field_validator("tags", "screenshots", mode="before")
    @classmethod
    def _empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator(
        "strategy", "setup", "setup_description", "notes", "emotions", "time_frame",
        mode="before",
    )
    @classmethod
    def _empty_text(cls, v: Any) -> Any:
        return "" if v is None else v


# ---------------------------------------------------------------------------
# Filters (query-only, never persisted)
# ---------------------------------------------------------------------------

class DateRange(BaseModel):
    start_date: dt.date
    end_date: dt.date


class ProfitRange(BaseModel):
    min: float | None = None  # None = unbounded
    max: float | None = None


class FilterOptions(BaseModel):
    """Criteria for a filtered view of the trade collection."""

    date_range: DateRange | None = None
    symbols: list[str] = Field(default_factory=list)
    direction: Direction | None = None
    strategies: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    profit_range: ProfitRange = Field(default_factory=ProfitRange)

    @property
    def is_empty(self) -> bool:
        return self == FilterOptions()
