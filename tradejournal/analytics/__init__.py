"""Performance analytics over trade history."""

from tradejournal.analytics.distribution import R_BUCKETS, bucket_for, r_multiple_distribution
from tradejournal.analytics.engine import compute_report
from tradejournal.analytics.heatmap import (
    HeatmapCell,
    HeatmapGrid,
    HeatmapWindow,
    MonthLabel,
    build_heatmap,
)
from tradejournal.analytics.normalize import correct_pnl, corrected_pnl

__all__ = [
    "HeatmapCell",
    "HeatmapGrid",
    "HeatmapWindow",
    "MonthLabel",
    "R_BUCKETS",
    "bucket_for",
    "build_heatmap",
    "compute_report",
    "correct_pnl",
    "corrected_pnl",
    "r_multiple_distribution",
]
