"""Win rate per strategy/tag and per-day activity aggregates."""

from collections import defaultdict
from typing import Callable, Iterable

from tradejournal.analytics.normalize import clamp_finite, corrected_pnl, local_datetime
from tradejournal.models import DailyContribution, TradeRecord, TradeResult


def _win_rates(
    trades: Iterable[TradeRecord], labels: Callable[[TradeRecord], Iterable[str]]
) -> dict[str, float]:
    stats = defaultdict(lambda: {"total": 0, "wins": 0})
    for trade in trades:
        for label in labels(trade):
            stats[label]["total"] += 1
            if trade.result == TradeResult.WIN:
                stats[label]["wins"] += 1
    return {label: s["wins"] / s["total"] * 100 for label, s in stats.items()}


def win_rate_by_strategy(trades: Iterable[TradeRecord]) -> dict[str, float]:
    """Win rate per ``strategy_used``; an empty strategy is its own group."""
    return _win_rates(trades, lambda t: [t.strategy_used])


def win_rate_by_tag(trades: Iterable[TradeRecord]) -> dict[str, float]:
    """Win rate per setup tag. A trade counts once for each of its tags."""
    return _win_rates(trades, lambda t: t.setup_tags)


def day_key(trade: TradeRecord) -> str:
    """Local calendar day of a trade as YYYY-MM-DD."""
    return local_datetime(trade.date_time).strftime("%Y-%m-%d")


def daily_contribution(trades: Iterable[TradeRecord]) -> list[DailyContribution]:
    """Aggregate trades per local calendar day, oldest day first.

    Wins follow ``result``; every other result, Break Even included,
    counts as a loss for the day.
    """
    daily_stats = defaultdict(lambda: {"wins": 0, "losses": 0, "total": 0, "pnl": 0.0})
    for trade in trades:
        stats = daily_stats[day_key(trade)]
        stats["total"] += 1
        stats["pnl"] = clamp_finite(stats["pnl"] + corrected_pnl(trade))
        if trade.result == TradeResult.WIN:
            stats["wins"] += 1
        else:
            stats["losses"] += 1

    days = []
    for day in sorted(daily_stats):
        stats = daily_stats[day]
        if stats["wins"] > stats["losses"]:
            outcome = "win"
        elif stats["losses"] > stats["wins"]:
            outcome = "loss"
        else:
            outcome = "neutral"
        days.append(
            DailyContribution(
                date=day,
                wins=stats["wins"],
                losses=stats["losses"],
                total=stats["total"],
                outcome=outcome,
                pnl=stats["pnl"],
            )
        )
    return days
