"""Property-based and scenario tests for the analytics engine.

**Feature: trade-journal-analytics**
"""

import json
import math
import sys
from datetime import datetime, timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics import R_BUCKETS, bucket_for, compute_report, corrected_pnl
from tradejournal.analytics.breakdown import (
    daily_contribution,
    day_key,
    win_rate_by_strategy,
    win_rate_by_tag,
)
from tradejournal.analytics.metrics import calculate_profit_factor
from tradejournal.models import MetricSource, TradeRecord, TradeResult


def trade_strategy():
    """Generate TradeRecord objects with sane numeric ranges."""
    return st.builds(
        TradeRecord,
        id=st.none(),
        date_time=st.datetimes(
            min_value=datetime(2020, 1, 1),
            max_value=datetime(2026, 12, 31),
        ),
        asset_pair=st.sampled_from(["EURUSD", "BTCUSD", "AAPL", "ES"]),
        result=st.sampled_from(list(TradeResult)),
        pnl_absolute=st.floats(min_value=-10000.0, max_value=10000.0, allow_nan=False, allow_infinity=False),
        r_multiple=st.floats(min_value=-6.0, max_value=6.0, allow_nan=False, allow_infinity=False),
        strategy_used=st.sampled_from(["", "Breakout", "Reversal", "Trend"]),
        setup_tags=st.lists(st.sampled_from(["london", "asia", "news", "a+"]), max_size=3, unique=True),
    )


def make_trade(result, pnl=0.0, r=0.0, when=None, strategy="", tags=None) -> TradeRecord:
    return TradeRecord(
        date_time=when or datetime(2024, 5, 1, 10, 0),
        asset_pair="EURUSD",
        result=result,
        pnl_absolute=pnl,
        r_multiple=r,
        strategy_used=strategy,
        setup_tags=tags or [],
    )


class TestReportProperties:
    """
    **Feature: trade-journal-analytics, Property 1: Report Invariants**

    *For any* trade set, rates stay within [0, 100], the equity curve has
    one point per trade, and the distribution accounts for every trade.
    """

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=40))
    @settings(max_examples=100)
    def test_win_rate_bounds(self, trades: list[TradeRecord]):
        report = compute_report(trades)

        assert 0 <= report.win_rate <= 100
        has_wins = any(t.result == TradeResult.WIN for t in trades)
        assert (report.win_rate == 0) == (not has_wins)

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_equity_curve_length_and_final_value(self, trades: list[TradeRecord]):
        report = compute_report(trades)

        assert len(report.equity_curve) == len(trades)
        if trades:
            expected = sum(corrected_pnl(t) for t in trades)
            assert math.isclose(
                report.equity_curve[-1].cumulative_pnl, expected, abs_tol=1e-6
            )

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_equity_curve_chronological(self, trades: list[TradeRecord]):
        dates = [p.date for p in compute_report(trades).equity_curve]
        assert dates == sorted(dates)

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_distribution_counts_sum_to_total(self, trades: list[TradeRecord]):
        report = compute_report(trades)

        assert sum(b.count for b in report.r_multiple_distribution) == report.total_trades
        assert all(b.count > 0 for b in report.r_multiple_distribution)
        labels = [b.range for b in report.r_multiple_distribution]
        assert labels == [label for label in R_BUCKETS if label in labels]

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=40))
    @settings(max_examples=100)
    def test_group_rates_bounded_and_complete(self, trades: list[TradeRecord]):
        report = compute_report(trades)

        assert set(report.win_rate_by_strategy) == {t.strategy_used for t in trades}
        assert set(report.win_rate_by_tag) == {tag for t in trades for tag in t.setup_tags}
        for rate in list(report.win_rate_by_strategy.values()) + list(report.win_rate_by_tag.values()):
            assert 0 <= rate <= 100

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_order_independent(self, trades: list[TradeRecord]):
        assert compute_report(trades) == compute_report(list(reversed(trades)))

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=50)
    def test_scalars_finite_and_json_safe(self, trades: list[TradeRecord]):
        report = compute_report(trades)
        payload = report.to_json_dict()

        for key, value in payload.items():
            if isinstance(value, float):
                assert math.isfinite(value), key
        # Strict JSON: no NaN/Infinity tokens
        json.dumps(payload, allow_nan=False)

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_daily_totals_sum_to_trade_count(self, trades: list[TradeRecord]):
        days = compute_report(trades).daily_contribution

        assert sum(d.total for d in days) == len(trades)
        assert [d.date for d in days] == sorted(d.date for d in days)
        for d in days:
            assert d.wins + d.losses == d.total


class TestReportScenarios:
    """Worked examples."""

    def test_empty_trade_list(self):
        report = compute_report([])

        assert report.total_trades == 0
        assert report.win_rate == 0
        assert report.average_pnl == 0
        assert report.expectancy == 0
        assert report.profit_factor.as_float() == 0
        assert report.r_multiple_distribution == []
        assert report.equity_curve == []
        assert report.win_rate_by_strategy == {}
        assert report.win_rate_by_tag == {}
        assert report.daily_contribution == []

    def test_single_win_with_negative_pnl(self):
        report = compute_report([make_trade(TradeResult.WIN, pnl=-50)])

        assert report.win_rate == 100
        assert report.average_pnl == 50
        assert report.average_win_pnl == 50
        assert report.average_loss_pnl == 0
        assert report.largest_win_pnl == 50
        assert report.profit_factor.is_infinite
        assert report.equity_curve[0].cumulative_pnl == 50

    def test_win_and_loss_pair(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=100, r=2, when=datetime(2024, 5, 1, 9)),
            make_trade(TradeResult.LOSS, pnl=-50, r=-1, when=datetime(2024, 5, 2, 9)),
        ]
        report = compute_report(trades)

        assert report.win_rate == 50
        assert report.average_pnl == 25
        assert report.expectancy == 0.5 * 100 - 0.5 * 50
        assert report.profit_factor.value == 2
        assert not report.profit_factor.is_infinite
        assert [(b.range, b.count) for b in report.r_multiple_distribution] == [
            ("-1R to 0R", 1),
            ("1R to 2R", 1),
        ]
        assert [p.cumulative_pnl for p in report.equity_curve] == [100, 50]
        assert [p.cumulative_r for p in report.equity_curve] == [2, 1]

    def test_r_multiple_expectancy(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=100, r=3),
            make_trade(TradeResult.LOSS, pnl=-50, r=-1),
        ]
        report = compute_report(trades, MetricSource.R_MULTIPLE)

        assert report.metric_source == MetricSource.R_MULTIPLE
        assert report.expectancy == 0.5 * 3 - 0.5 * 1
        # P&L metrics do not depend on the source
        assert report.average_pnl == 25

    def test_loss_with_positive_pnl_counts_against_profit_factor(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=90),
            make_trade(TradeResult.LOSS, pnl=30),
        ]
        report = compute_report(trades)

        assert report.largest_loss_pnl == -30
        assert report.average_loss_pnl == -30
        assert report.profit_factor.value == 3
        assert report.total_pnl == 60

    def test_all_losses(self):
        trades = [make_trade(TradeResult.LOSS, pnl=-10, r=-1) for _ in range(3)]
        report = compute_report(trades)

        assert report.win_rate == 0
        assert report.largest_win_pnl == 0
        assert report.largest_loss_pnl == -10
        assert report.profit_factor.as_float() == 0
        assert report.expectancy == -10

    def test_break_even_trades_are_neither_wins_nor_losses(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=20),
            make_trade(TradeResult.BREAK_EVEN, pnl=0),
        ]
        report = compute_report(trades)

        assert report.break_even_trades == 1
        assert report.win_rate == 50
        assert report.profit_factor.is_infinite

    def test_largest_win_r_floored_at_zero(self):
        report = compute_report([make_trade(TradeResult.WIN, pnl=5, r=-0.5)])
        assert report.largest_win == 0
        assert report.average_win_r == -0.5

    def test_same_day_win_and_loss(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=10, when=datetime(2024, 5, 1, 9)),
            make_trade(TradeResult.LOSS, pnl=-10, when=datetime(2024, 5, 1, 15)),
        ]
        days = compute_report(trades).daily_contribution

        assert len(days) == 1
        day = days[0]
        assert (day.date, day.wins, day.losses, day.total, day.outcome) == (
            "2024-05-01", 1, 1, 2, "neutral",
        )
        assert day.pnl == 0


class TestProfitFactor:
    def test_finite(self):
        assert calculate_profit_factor(300, 100).value == 3

    def test_infinite_when_no_losses(self):
        pf = calculate_profit_factor(50, 0)
        assert pf.is_infinite
        assert pf.as_float() == math.inf

    def test_zero_when_nothing(self):
        pf = calculate_profit_factor(0, 0)
        assert not pf.is_infinite
        assert pf.value == 0

    def test_infinite_round_trips_through_json(self):
        report = compute_report([make_trade(TradeResult.WIN, pnl=10)])
        payload = json.loads(json.dumps(report.to_json_dict()))
        assert payload["profitFactor"] == {"kind": "infinite", "value": None}


class TestRBuckets:
    def test_boundaries(self):
        assert bucket_for(-2.5) == "< -2R"
        assert bucket_for(-2) == "-2R to -1R"
        assert bucket_for(-1.5) == "-2R to -1R"
        assert bucket_for(-1) == "-1R to 0R"
        assert bucket_for(-0.1) == "-1R to 0R"
        assert bucket_for(0) == "0R (BE)"
        assert bucket_for(0.5) == "0R to 1R"
        assert bucket_for(1) == "0R to 1R"
        assert bucket_for(2) == "1R to 2R"
        assert bucket_for(3) == "2R to 3R"
        assert bucket_for(3.01) == "> 3R"


class TestBreakdowns:
    def test_empty_strategy_is_a_group(self):
        trades = [
            make_trade(TradeResult.WIN, strategy=""),
            make_trade(TradeResult.LOSS, strategy=""),
            make_trade(TradeResult.LOSS, strategy="Breakout"),
        ]
        assert win_rate_by_strategy(trades) == {"": 50.0, "Breakout": 0.0}

    def test_tags_fan_out(self):
        trades = [
            make_trade(TradeResult.WIN, tags=["london", "trend"]),
            make_trade(TradeResult.LOSS, tags=["london"]),
            make_trade(TradeResult.LOSS),
        ]
        assert win_rate_by_tag(trades) == {"london": 50.0, "trend": 100.0}

    def test_daily_outcomes(self):
        base = datetime(2024, 2, 1, 12)
        trades = [
            make_trade(TradeResult.WIN, when=base),
            make_trade(TradeResult.LOSS, when=base + timedelta(days=1)),
            make_trade(TradeResult.LOSS, when=base + timedelta(days=1, hours=1)),
            make_trade(TradeResult.BREAK_EVEN, when=base + timedelta(days=2)),
        ]
        days = daily_contribution(trades)

        assert [(d.date, d.outcome) for d in days] == [
            ("2024-02-01", "win"),
            ("2024-02-02", "loss"),
            ("2024-02-03", "loss"),
        ]
        assert (days[2].wins, days[2].losses, days[2].total) == (0, 1, 1)

    def test_break_even_offsets_a_win_on_the_same_day(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=10, when=datetime(2024, 2, 1, 9)),
            make_trade(TradeResult.BREAK_EVEN, pnl=0, when=datetime(2024, 2, 1, 11)),
        ]
        (day,) = daily_contribution(trades)

        assert (day.wins, day.losses, day.total, day.outcome) == (1, 1, 2, "neutral")


class TestExtremeValues:
    """
    **Feature: trade-journal-analytics, Property 7: Finite Aggregates**

    *For any* finite P&L and R values, however large, every reported
    figure stays finite and the report serializes to strict JSON.
    """

    @given(
        trades=st.lists(
            st.builds(
                TradeRecord,
                date_time=st.datetimes(
                    min_value=datetime(2024, 1, 1),
                    max_value=datetime(2024, 1, 7),
                ),
                result=st.sampled_from(list(TradeResult)),
                pnl_absolute=st.floats(allow_nan=False, allow_infinity=False),
                r_multiple=st.floats(allow_nan=False, allow_infinity=False),
            ),
            max_size=20,
        )
    )
    @settings(max_examples=100)
    def test_report_stays_finite(self, trades: list[TradeRecord]):
        report = compute_report(trades)
        payload = json.loads(json.dumps(report.to_json_dict(), allow_nan=False))

        for point in report.equity_curve:
            assert math.isfinite(point.cumulative_pnl)
            assert math.isfinite(point.cumulative_r)
        for day in report.daily_contribution:
            assert math.isfinite(day.pnl)
        if not report.profit_factor.is_infinite:
            assert math.isfinite(payload["profitFactor"]["value"])

    def test_huge_wins_saturate(self):
        trades = [make_trade(TradeResult.WIN, pnl=1e308, r=1e308) for _ in range(2)]
        report = compute_report(trades)

        assert report.total_pnl == sys.float_info.max
        assert report.average_pnl == 1e308
        assert report.equity_curve[-1].cumulative_pnl == sys.float_info.max
        assert report.equity_curve[-1].cumulative_r == sys.float_info.max
        assert report.daily_contribution[0].pnl == sys.float_info.max
        json.dumps(report.to_json_dict(), allow_nan=False)

    def test_overflowing_ratio_is_infinite(self):
        trades = [
            make_trade(TradeResult.WIN, pnl=1e300),
            make_trade(TradeResult.LOSS, pnl=-1e-300),
        ]
        assert compute_report(trades).profit_factor.is_infinite
        assert calculate_profit_factor(1e300, 1e-300).is_infinite


class TestLocalDays:
    """Aware timestamps are bucketed by the local calendar day."""

    def test_aware_late_evening_stays_on_local_day(self):
        local = datetime(2024, 5, 1, 23, 45).astimezone()
        trade = make_trade(TradeResult.WIN, when=local.astimezone(timezone.utc))

        assert day_key(trade) == "2024-05-01"

    def test_aware_just_after_midnight(self):
        local = datetime(2024, 5, 2, 0, 10).astimezone()
        trades = [
            make_trade(TradeResult.WIN, when=local.astimezone(timezone.utc)),
            make_trade(TradeResult.LOSS, when=datetime(2024, 5, 1, 23, 50)),
        ]
        days = compute_report(trades).daily_contribution

        assert [(d.date, d.outcome) for d in days] == [
            ("2024-05-01", "loss"),
            ("2024-05-02", "win"),
        ]


class TestSerializedOrder:
    def test_tag_order_independent_of_input_order(self):
        when = datetime(2024, 5, 1, 10)
        first = make_trade(TradeResult.WIN, when=when, tags=["news", "london"])
        second = make_trade(TradeResult.WIN, when=when, tags=["asia"])

        forward = json.dumps(compute_report([first, second]).to_json_dict())
        backward = json.dumps(compute_report([second, first]).to_json_dict())

        assert forward == backward
        assert list(json.loads(forward)["winRateByTag"]) == ["asia", "news", "london"]
