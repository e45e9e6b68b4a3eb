"""Analytics report data models.

A Report is transient: it is rebuilt from the full trade history on every
request and never persisted. Field names are snake_case in Python and
camelCase once serialized with :meth:`Report.to_json_dict`.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_REPORT_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MetricSource(str, Enum):
    """Which per-trade figure drives expectancy."""

    PNL = "pnl"
    R_MULTIPLE = "r"


class ProfitFactor(BaseModel):
    """Gross profit over gross loss, tagged so infinity survives JSON.

    ``kind`` is ``"infinite"`` when there were profits but no losses; the
    ``value`` is then ``None``.
    """

    kind: Literal["finite", "infinite"] = "finite"
    value: Optional[float] = 0.0

    model_config = _REPORT_CONFIG

    @classmethod
    def finite(cls, value: float) -> "ProfitFactor":
        return cls(kind="finite", value=value)

    @classmethod
    def infinite(cls) -> "ProfitFactor":
        return cls(kind="infinite", value=None)

    @property
    def is_infinite(self) -> bool:
        return self.kind == "infinite"

    def as_float(self) -> float:
        """Return the ratio as a float, using ``math.inf`` for the sentinel."""
        if self.is_infinite:
            return math.inf
        return self.value or 0.0


class RangeCount(BaseModel):
    """Number of trades whose R-multiple fell in a bucket."""

    range: str = Field(..., description="Bucket label, e.g. '1R to 2R'")
    count: int = Field(..., ge=0)

    model_config = _REPORT_CONFIG


class EquityPoint(BaseModel):
    """Running totals after one trade."""

    date: datetime
    cumulative_pnl: float
    cumulative_r: float

    model_config = _REPORT_CONFIG


class DailyContribution(BaseModel):
    """Aggregate of all trades on one local calendar day."""

    date: str = Field(..., description="Local calendar day, YYYY-MM-DD")
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    outcome: Literal["win", "loss", "neutral"]
    pnl: float = Field(default=0.0, description="Sum of corrected P&L for the day")

    model_config = _REPORT_CONFIG


class Report(BaseModel):
    """Performance analytics for one user's trade history."""

    metric_source: MetricSource = MetricSource.PNL

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    break_even_trades: int = 0
    win_rate: float = 0.0

    total_pnl: float = 0.0
    average_pnl: float = 0.0
    average_win_pnl: float = 0.0
    average_loss_pnl: float = 0.0
    largest_win_pnl: float = 0.0
    largest_loss_pnl: float = 0.0

    average_r_multiple: float = 0.0
    average_win_r: float = 0.0
    average_loss_r: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0

    expectancy: float = 0.0
    profit_factor: ProfitFactor = Field(default_factory=ProfitFactor)

    r_multiple_distribution: list[RangeCount] = Field(default_factory=list)
    equity_curve: list[EquityPoint] = Field(default_factory=list)
    win_rate_by_strategy: dict[str, float] = Field(default_factory=dict)
    win_rate_by_tag: dict[str, float] = Field(default_factory=dict)
    daily_contribution: list[DailyContribution] = Field(default_factory=list)

    model_config = _REPORT_CONFIG

    def to_json_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
