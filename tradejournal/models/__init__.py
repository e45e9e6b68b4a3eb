"""Data models for the trade journal."""

from tradejournal.models.trade import Direction, TradeRecord, TradeResult, coerce_number
from tradejournal.models.report import (
    DailyContribution,
    EquityPoint,
    MetricSource,
    ProfitFactor,
    RangeCount,
    Report,
)

__all__ = [
    "DailyContribution",
    "Direction",
    "EquityPoint",
    "MetricSource",
    "ProfitFactor",
    "RangeCount",
    "Report",
    "TradeRecord",
    "TradeResult",
    "coerce_number",
]
