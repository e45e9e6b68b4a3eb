"""Aggregate scalar metrics over a trade history."""

import math
from typing import Sequence

from tradejournal.analytics.normalize import clamp_finite, corrected_pnl
from tradejournal.models import MetricSource, ProfitFactor, TradeRecord, TradeResult


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    total = sum(values)
    if math.isfinite(total):
        return total / len(values)
    return clamp_finite(sum(v / len(values) for v in values))


def _total(values: Sequence[float]) -> float:
    return clamp_finite(sum(values))


def empty_metrics() -> dict:
    """Metrics for a history with no trades."""
    return {
        "total_trades": 0,
        "winning_trades": 0,
        "losing_trades": 0,
        "break_even_trades": 0,
        "win_rate": 0.0,
        "total_pnl": 0.0,
        "average_pnl": 0.0,
        "average_win_pnl": 0.0,
        "average_loss_pnl": 0.0,
        "largest_win_pnl": 0.0,
        "largest_loss_pnl": 0.0,
        "average_r_multiple": 0.0,
        "average_win_r": 0.0,
        "average_loss_r": 0.0,
        "largest_win": 0.0,
        "largest_loss": 0.0,
        "expectancy": 0.0,
        "profit_factor": ProfitFactor.finite(0.0),
    }


def calculate_profit_factor(gross_profit: float, gross_loss: float) -> ProfitFactor:
    """Gross profit over gross loss.

    Args:
        gross_profit: Sum of absolute P&L over winning trades.
        gross_loss: Sum of absolute P&L over losing trades.

    Returns:
        A finite ratio, the infinite sentinel when only profits exist or
        the ratio overflows, or 0 when there is neither.
    """
    if gross_loss > 0:
        ratio = gross_profit / gross_loss
        if not math.isfinite(ratio):
            return ProfitFactor.infinite()
        return ProfitFactor.finite(ratio)
    if gross_profit > 0:
        return ProfitFactor.infinite()
    return ProfitFactor.finite(0.0)


def calculate_expectancy(
    win_fraction: float, average_win: float, loss_fraction: float, average_loss: float
) -> float:
    """Probability-weighted outcome per trade."""
    return win_fraction * average_win - loss_fraction * abs(average_loss)


def calculate_metrics(
    trades: Sequence[TradeRecord], metric_source: MetricSource = MetricSource.PNL
) -> dict:
    """Calculate scalar performance metrics.

    Win/loss membership follows each trade's ``result``; P&L figures use
    the sign-corrected P&L and R figures use the raw ``r_multiple``.

    Args:
        trades: Trade records in any order.
        metric_source: Whether expectancy is expressed in P&L or R.

    Returns:
        Dictionary keyed by Report field name.
    """
    if not trades:
        return empty_metrics()

    total = len(trades)
    wins = [t for t in trades if t.result == TradeResult.WIN]
    losses = [t for t in trades if t.result == TradeResult.LOSS]

    pnls = [corrected_pnl(t) for t in trades]
    win_pnls = [corrected_pnl(t) for t in wins]
    loss_pnls = [corrected_pnl(t) for t in losses]

    win_rs = [t.r_multiple for t in wins]
    loss_rs = [t.r_multiple for t in losses]

    average_win_pnl = _mean(win_pnls)
    average_loss_pnl = _mean(loss_pnls)
    average_win_r = _mean(win_rs)
    average_loss_r = _mean(loss_rs)

    win_fraction = len(wins) / total
    loss_fraction = len(losses) / total
    if metric_source == MetricSource.R_MULTIPLE:
        expectancy = calculate_expectancy(win_fraction, average_win_r, loss_fraction, average_loss_r)
    else:
        expectancy = calculate_expectancy(
            win_fraction, average_win_pnl, loss_fraction, average_loss_pnl
        )

    return {
        "total_trades": total,
        "winning_trades": len(wins),
        "losing_trades": len(losses),
        "break_even_trades": sum(1 for t in trades if t.result == TradeResult.BREAK_EVEN),
        "win_rate": win_fraction * 100,
        "total_pnl": _total(pnls),
        "average_pnl": _mean(pnls),
        "average_win_pnl": average_win_pnl,
        "average_loss_pnl": average_loss_pnl,
        # Largest win never reports below zero, largest loss never above it
        "largest_win_pnl": max(win_pnls + [0.0]) if win_pnls else 0.0,
        "largest_loss_pnl": min(loss_pnls + [0.0]) if loss_pnls else 0.0,
        "average_r_multiple": _mean([t.r_multiple for t in trades]),
        "average_win_r": average_win_r,
        "average_loss_r": average_loss_r,
        "largest_win": max(win_rs + [0.0]) if win_rs else 0.0,
        "largest_loss": min(loss_rs + [0.0]) if loss_rs else 0.0,
        "expectancy": clamp_finite(expectancy),
        "profit_factor": calculate_profit_factor(
            _total([abs(p) for p in win_pnls]), _total([abs(p) for p in loss_pnls])
        ),
    }
