"""
Delta & Ratio Engine Tests

- compute_delta: zero baseline, negative change, non-finite input
- compute_period_growth: first-to-last change inside the period
- ratio functions: zero / None denominators never divide
"""

import math
from datetime import date

import pytest

from app.analyzer.delta_engine import compute_delta, compute_period_growth, growth_percent
from app.analyzer.ratio_engine import (
    compute_ratios,
    subscribers_per_upload,
    views_per_subscriber,
    views_per_upload,
)
from app.core.errors import InvalidInputError
from app.models.metrics_models import EntityTotals
from conftest import daily_series, snap


# =============================================================================
# Delta Calculator
# =============================================================================

class TestComputeDelta:

    def test_growth(self):
        delta = compute_delta(150, 100)
        assert delta.absolute_change == 50
        assert delta.percent_change == 50.0

    def test_decline_is_negative(self):
        delta = compute_delta(50, 200)
        assert delta.absolute_change == -150
        assert delta.percent_change == -75.0

    @pytest.mark.parametrize("current", [0, 1, 999_999])
    def test_zero_baseline_is_zero_percent(self, current):
        delta = compute_delta(current, 0)
        assert delta.percent_change == 0
        assert delta.absolute_change == current

    def test_keeps_both_sums(self):
        delta = compute_delta(7, 3)
        assert (delta.current_window_sum, delta.previous_window_sum) == (7, 3)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(InvalidInputError):
            compute_delta(bad, 10)
        with pytest.raises(InvalidInputError):
            compute_delta(10, bad)

    @pytest.mark.parametrize("bad", ["100", None, True])
    def test_non_numeric_rejected(self, bad):
        with pytest.raises(InvalidInputError):
            compute_delta(bad, 10)

    def test_growth_percent_helper(self):
        assert growth_percent(60000, 5000) == 1100.0
        assert growth_percent(60000, 0) == 0.0

    def test_integer_sums_stay_integers(self):
        delta = compute_delta(670, 570)
        assert isinstance(delta.current_window_sum, int)
        assert isinstance(delta.absolute_change, int)
        assert '"current_window_sum":670,' in delta.model_dump_json()


# =============================================================================
# Period Growth
# =============================================================================

class TestPeriodGrowth:

    def test_first_to_last_snapshot_in_period(self):
        snapshots = daily_series(
            date(2026, 1, 1), [1000, 1100, 1300], subscribers=[50, 55, 75]
        )
        growth = compute_period_growth(snapshots, date(2026, 1, 3), days=30)
        assert growth.views_change == 300
        assert growth.views_change_percent == 30.0
        assert growth.subscribers_change == 25
        assert growth.subscribers_change_percent == 50.0

    def test_snapshots_before_period_ignored(self):
        snapshots = daily_series(date(2026, 1, 1), [10, 500, 600, 700])
        growth = compute_period_growth(snapshots, date(2026, 1, 4), days=3)
        assert growth.views_change == 200
        assert growth.views_change_percent == 40.0

    def test_single_snapshot_is_no_growth(self):
        growth = compute_period_growth([snap(date(2026, 1, 5), 900, 9)], date(2026, 1, 5))
        assert growth.period_days == 30
        assert growth.views_change == 0
        assert growth.subscribers_change_percent == 0

    def test_zero_starting_subscribers_is_zero_percent(self):
        snapshots = daily_series(date(2026, 1, 1), [1, 2], subscribers=[0, 40])
        growth = compute_period_growth(snapshots, date(2026, 1, 2))
        assert growth.subscribers_change == 40
        assert growth.subscribers_change_percent == 0


# =============================================================================
# Ratio Calculator
# =============================================================================

class TestRatios:

    @pytest.mark.parametrize("denominator", [0, None])
    def test_zero_or_absent_denominator_is_zero(self, denominator):
        assert views_per_subscriber(1000, denominator) == 0
        assert views_per_upload(1000, denominator) == 0
        assert subscribers_per_upload(1000, denominator) == 0

    def test_values(self):
        assert views_per_subscriber(10000, 500) == 20.0
        assert views_per_upload(10000, 20) == 500.0
        assert subscribers_per_upload(500, 20) == 25.0

    def test_absent_numerator_is_zero(self):
        assert views_per_subscriber(None, 10) == 0.0

    def test_never_nan_or_inf(self):
        for value in (views_per_subscriber(0, 0), views_per_upload(None, None)):
            assert math.isfinite(value)

    def test_compute_ratios_from_partial_totals(self):
        ratios = compute_ratios(EntityTotals(total_views=900, total_subscribers=300))
        assert ratios == {
            "views_per_subscriber": 3.0,
            "views_per_upload": 0.0,
            "subscribers_per_upload": 0.0,
        }
