"""Equity curve construction."""

from typing import Iterable

from tradejournal.analytics.normalize import chronological, clamp_finite, corrected_pnl
from tradejournal.models import EquityPoint, TradeRecord


def equity_curve(trades: Iterable[TradeRecord]) -> list[EquityPoint]:
    """Build the cumulative P&L and R series, one point per trade.

    Trades are re-sorted by time here; callers may pass filtered or
    reordered lists. Running totals saturate instead of overflowing.
    """
    cumulative_pnl = 0.0
    cumulative_r = 0.0
    points = []
    for trade in chronological(trades):
        cumulative_pnl = clamp_finite(cumulative_pnl + corrected_pnl(trade))
        cumulative_r = clamp_finite(cumulative_r + trade.r_multiple)
        points.append(
            EquityPoint(
                date=trade.date_time,
                cumulative_pnl=cumulative_pnl,
                cumulative_r=cumulative_r,
            )
        )
    return points
