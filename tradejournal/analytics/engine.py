"""Analytics engine.

Turns a user's complete trade history into a :class:`Report`. The engine
is stateless: every call recomputes everything from the records it is
given and performs no I/O.
"""

import logging
from typing import Iterable

from tradejournal.analytics.breakdown import (
    daily_contribution,
    win_rate_by_strategy,
    win_rate_by_tag,
)
from tradejournal.analytics.distribution import r_multiple_distribution
from tradejournal.analytics.equity import equity_curve
from tradejournal.analytics.metrics import calculate_metrics
from tradejournal.analytics.normalize import chronological
from tradejournal.models import MetricSource, Report, TradeRecord

logger = logging.getLogger(__name__)


def compute_report(
    trades: Iterable[TradeRecord], metric_source: MetricSource = MetricSource.PNL
) -> Report:
    """Compute the full analytics report.

    Args:
        trades: All trades for one user, in any order.
        metric_source: Source for expectancy (P&L or R-multiple).

    Returns:
        Report; zero-valued with empty collections when there are no trades.
    """
    ordered = chronological(trades)
    if not ordered:
        logger.debug("No trades, returning empty report")
        return Report(metric_source=metric_source)

    metrics = calculate_metrics(ordered, metric_source)
    report = Report(
        metric_source=metric_source,
        r_multiple_distribution=r_multiple_distribution(ordered),
        equity_curve=equity_curve(ordered),
        win_rate_by_strategy=win_rate_by_strategy(ordered),
        win_rate_by_tag=win_rate_by_tag(ordered),
        daily_contribution=daily_contribution(ordered),
        **metrics,
    )
    logger.debug(
        "Computed report: %d trades, win rate %.1f%%, source=%s",
        report.total_trades,
        report.win_rate,
        metric_source.value,
    )
    return report
