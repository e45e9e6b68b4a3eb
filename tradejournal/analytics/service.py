"""Analytics service: fetch a user's trades, then run the engine."""

import logging
from datetime import date
from typing import Optional

from tradejournal.analytics.engine import compute_report
from tradejournal.analytics.heatmap import HeatmapGrid, HeatmapWindow, build_heatmap
from tradejournal.auth import AuthProvider
from tradejournal.db.store import DataStore
from tradejournal.models import MetricSource, Report

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Builds reports for the current user.

    The store and identity provider are injected so the same service can
    back the CLI, tests, or any other front end.
    """

    def __init__(
        self,
        store: DataStore,
        auth: AuthProvider,
        metric_source: MetricSource = MetricSource.PNL,
    ):
        self.store = store
        self.auth = auth
        self.metric_source = metric_source

    def report(self, metric_source: Optional[MetricSource] = None) -> Report:
        """Compute the report over the current user's full history.

        Raises:
            NotAuthenticatedError: If no user is logged in.
        """
        user_id = self.auth.current_user()
        trades = self.store.list_trades(user_id)
        logger.debug("Loaded %d trades for user %s", len(trades), user_id)
        return compute_report(trades, metric_source or self.metric_source)

    def heatmap(
        self,
        window: HeatmapWindow = HeatmapWindow.TRAILING,
        today: Optional[date] = None,
        year: Optional[int] = None,
        show_weekends: bool = True,
    ) -> HeatmapGrid:
        """Lay the current user's daily activity out on a week grid."""
        report = self.report()
        return build_heatmap(
            report.daily_contribution,
            window=window,
            today=today,
            year=year,
            show_weekends=show_weekends,
        )
