"""P&L sign correction.

Entered P&L sometimes carries the wrong sign for the recorded result
(a Loss logged as +50). The ``result`` label wins: P&L aggregates use the
corrected value, while win/loss membership keeps reading ``result``.
"""

import math
import sys
from datetime import datetime
from typing import Iterable

from tradejournal.models import TradeRecord, TradeResult, coerce_number

__all__ = [
    "chronological",
    "clamp_finite",
    "coerce_number",
    "correct_pnl",
    "corrected_pnl",
    "local_datetime",
]

MAX_AMOUNT = sys.float_info.max


def correct_pnl(result: TradeResult, pnl: float) -> float:
    """Return ``pnl`` with its sign forced to agree with ``result``.

    Break-even trades and already-consistent values pass through.
    """
    if result == TradeResult.LOSS and pnl > 0:
        return -abs(pnl)
    if result == TradeResult.WIN and pnl < 0:
        return abs(pnl)
    return pnl


def corrected_pnl(trade: TradeRecord) -> float:
    """Corrected P&L for a single trade."""
    return correct_pnl(trade.result, trade.pnl_absolute)


def clamp_finite(value: float) -> float:
    """Saturate an aggregate at the largest finite float.

    Sums of very large P&L can overflow; aggregates stay finite so the
    report always serializes to strict JSON. NaN becomes 0.
    """
    if math.isnan(value):
        return 0.0
    return max(-MAX_AMOUNT, min(MAX_AMOUNT, value))


def local_datetime(value: datetime) -> datetime:
    """Express ``value`` as naive local time.

    Aware timestamps are converted to the machine's local zone; naive
    ones are assumed to be local already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def chronological(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Sort trades oldest first with a deterministic tie-break."""
    return sorted(
        trades,
        key=lambda t: (
            local_datetime(t.date_time),
            t.id is None,
            t.id or 0,
            t.asset_pair,
            t.pnl_absolute,
            t.r_multiple,
            t.result.value,
            t.strategy_used,
            tuple(t.setup_tags),
            t.direction.value,
            t.notes,
        ),
    )
