"""R-multiple distribution buckets."""

from typing import Sequence

from tradejournal.models import RangeCount, TradeRecord

# Display order, lowest bucket first
R_BUCKETS = [
    "< -2R",
    "-2R to -1R",
    "-1R to 0R",
    "0R (BE)",
    "0R to 1R",
    "1R to 2R",
    "2R to 3R",
    "> 3R",
]


def bucket_for(r: float) -> str:
    """Return the bucket label for an R-multiple.

    Negative buckets are closed on the left, positive ones on the right,
    and exactly zero is its own bucket.
    """
    if r < -2:
        return "< -2R"
    if r < -1:
        return "-2R to -1R"
    if r < 0:
        return "-1R to 0R"
    if r == 0:
        return "0R (BE)"
    if r <= 1:
        return "0R to 1R"
    if r <= 2:
        return "1R to 2R"
    if r <= 3:
        return "2R to 3R"
    return "> 3R"


def r_multiple_distribution(trades: Sequence[TradeRecord]) -> list[RangeCount]:
    """Count trades per R bucket, omitting empty buckets."""
    counts = dict.fromkeys(R_BUCKETS, 0)
    for trade in trades:
        counts[bucket_for(trade.r_multiple)] += 1
    return [RangeCount(range=label, count=count) for label, count in counts.items() if count]
