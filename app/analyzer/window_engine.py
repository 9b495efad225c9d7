"""CHANLENS — Window Engine.

Trailing N-day window sums over a channel's daily snapshot history.

Snapshot ``views`` are cumulative lifetime counters. Window sums add those
cumulative values exactly as sampled on each day in the window; they are
NOT "views gained in the window". Downstream deltas and dashboards depend
on this convention, so it must not be replaced with a last-minus-first
difference.
"""

from datetime import date, timedelta
from typing import List, Sequence

from app.core.errors import InvalidInputError
from app.models.metrics_models import DailySnapshot, WindowedViews

STANDARD_WINDOWS = (3, 7, 30)


def validate_snapshots(snapshots: Sequence[DailySnapshot]) -> None:
    """Require strictly increasing, unique snapshot dates."""
    for prev, curr in zip(snapshots, snapshots[1:]):
        if curr.stat_date <= prev.stat_date:
            kind = "duplicate" if curr.stat_date == prev.stat_date else "out-of-order"
            raise InvalidInputError(
                f"Snapshot history has {kind} date {curr.stat_date.isoformat()} "
                f"after {prev.stat_date.isoformat()}"
            )


def window_bounds(end: date, days: int) -> tuple[date, date]:
    """Inclusive bounds of the ``days``-long window ending on ``end``."""
    if days < 1:
        raise InvalidInputError(f"Window length must be positive, got {days}")
    return end - timedelta(days=days - 1), end


def previous_window_bounds(end: date, days: int) -> tuple[date, date]:
    """Bounds of the equal-length window immediately before the current one."""
    start, _ = window_bounds(end, days)
    return window_bounds(start - timedelta(days=1), days)


def sum_views_in_window(
    snapshots: Sequence[DailySnapshot],
    window_start: date,
    window_end: date,
) -> int:
    """Sum the cumulative ``views`` of every snapshot in [start, end]."""
    return sum(
        s.views for s in snapshots if window_start <= s.stat_date <= window_end
    )


def windowed_views(
    snapshots: Sequence[DailySnapshot],
    end: date,
    days: int,
    previous: bool = False,
) -> WindowedViews:
    """Build the WindowedViews for the current (or previous) ``days`` window."""
    if previous:
        start, stop = previous_window_bounds(end, days)
    else:
        start, stop = window_bounds(end, days)
    return WindowedViews(
        window_days=days,
        window_start=start,
        window_end=stop,
        sum_views=sum_views_in_window(snapshots, start, stop),
    )


def average_daily_change(snapshots: Sequence[DailySnapshot], field: str) -> int:
    """Mean row-over-row gain of a cumulative field, clamped at zero.

    Unlike the window sums this is a true difference, used for the
    "average daily views / subscribers gained" figures.
    """
    if len(snapshots) < 2:
        return 0
    changes: List[int] = [
        getattr(curr, field) - getattr(prev, field)
        for prev, curr in zip(snapshots, snapshots[1:])
    ]
    return max(0, round(sum(changes) / len(changes)))
