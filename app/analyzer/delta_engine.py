"""CHANLENS — Delta Engine.

Compares a trailing window's sum against the immediately preceding window
of equal length. A zero baseline means "no prior baseline", not infinite
growth, and yields a 0% change.
"""

import math
from datetime import date
from numbers import Real
from typing import Sequence

from app.core.errors import InvalidInputError
from app.analyzer.window_engine import window_bounds
from app.models.metrics_models import DailySnapshot, GrowthDelta, PeriodGrowth


def _require_finite(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return value


def growth_percent(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``; 0 without a baseline."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def compute_delta(current_window_sum, previous_window_sum) -> GrowthDelta:
    """Absolute and percentage change between two window sums."""
    current = _require_finite("current_window_sum", current_window_sum)
    previous = _require_finite("previous_window_sum", previous_window_sum)

    return GrowthDelta(
        current_window_sum=current,
        previous_window_sum=previous,
        absolute_change=current - previous,
        percent_change=growth_percent(current, previous),
    )


def compute_period_growth(
    snapshots: Sequence[DailySnapshot], end: date, days: int = 30
) -> PeriodGrowth:
    """Subscribers and views gained over the ``days`` window ending on ``end``.

    Compares the last snapshot in the window with the first one. Fewer than
    two snapshots in the window means no measurable growth.
    """
    start, stop = window_bounds(end, days)
    in_window = [s for s in snapshots if start <= s.stat_date <= stop]
    if len(in_window) < 2:
        return PeriodGrowth(period_days=days)

    first, last = in_window[0], in_window[-1]
    return PeriodGrowth(
        period_days=days,
        subscribers_change=last.subscribers - first.subscribers,
        subscribers_change_percent=round(
            growth_percent(last.subscribers, first.subscribers), 2
        ),
        views_change=last.views - first.views,
        views_change_percent=round(growth_percent(last.views, first.views), 2),
    )
