"""TradeRecord data model."""

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def coerce_number(value: Any) -> float:
    """Parse a numeric input, falling back to 0.0.

    Missing values, blank or non-numeric strings, NaN and infinities all
    become 0.0 so a single bad cell never poisons an aggregate.

    Args:
        value: Raw value from the store or user input.

    Returns:
        A finite float.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


class Direction(str, Enum):
    """Trade direction."""

    LONG = "Long"
    SHORT = "Short"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Direction"]:
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None


class TradeResult(str, Enum):
    """Recorded outcome of a trade. This label is authoritative."""

    WIN = "Win"
    LOSS = "Loss"
    BREAK_EVEN = "Break Even"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TradeResult"]:
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "").replace(" ", "")
            for member in cls:
                if member.value.lower().replace(" ", "") == key:
                    return member
        return None


class TradeRecord(BaseModel):
    """Represents a single backtest trade entry."""

    id: Optional[int] = Field(default=None, description="Database ID")
    user_id: str = Field(default="", description="Owning user")
    date_time: datetime = Field(..., description="When the trade was opened/logged")
    asset_pair: str = Field(default="", description="Instrument identifier")
    direction: Direction = Field(default=Direction.LONG, description="Long or Short")
    entry_price: float = Field(default=0.0, description="Entry price")
    exit_price: float = Field(default=0.0, description="Exit price")
    stop_loss_price: float = Field(default=0.0, description="Stop loss price")
    risk_per_trade: float = Field(default=0.0, description="Risk per trade (%)")
    result: TradeResult = Field(..., description="Win, Loss or Break Even")
    pnl_absolute: float = Field(default=0.0, description="Signed P&L in account currency")
    r_multiple: float = Field(default=0.0, description="Signed R-multiple")
    strategy_used: str = Field(default="", description="Strategy label")
    setup_tags: list[str] = Field(default_factory=list, description="Setup tags")
    notes: str = Field(default="", description="User notes")
    screenshot_url: str = Field(default="", description="Chart screenshot link")

    model_config = {"frozen": True}

    @field_validator(
        "entry_price",
        "exit_price",
        "stop_loss_price",
        "risk_per_trade",
        "pnl_absolute",
        "r_multiple",
        mode="before",
    )
    @classmethod
    def _parse_number(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("result", mode="before")
    @classmethod
    def _parse_result(cls, value: Any) -> Any:
        return TradeResult(value) if isinstance(value, str) else value

    @field_validator("direction", mode="before")
    @classmethod
    def _parse_direction(cls, value: Any) -> Any:
        return Direction(value) if isinstance(value, str) else value

    @field_validator("strategy_used", "asset_pair", "notes", "screenshot_url", mode="before")
    @classmethod
    def _parse_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("setup_tags", mode="before")
    @classmethod
    def _parse_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return [str(tag) for tag in value]
