"""CHANLENS — Takeoff Engine.

Detects a channel's breakout ("takeoff") month:
- At least 60 daily snapshots are required before any scan is attempted
- Snapshots are bucketed by calendar month, summing ``views`` per bucket
  (same cumulative-sum convention as the window engine)
- The EARLIEST month with >= 50,000 views AND >= 1000% growth over the
  previous month is the takeoff; later, larger jumps are ignored
"""

from collections import defaultdict
from datetime import date
from typing import List, Optional, Sequence

from app.analyzer.delta_engine import growth_percent
from app.analyzer.window_engine import validate_snapshots
from app.models.metrics_models import (
    DailySnapshot,
    MonthlyViews,
    TakeoffEvent,
    TakeoffReason,
    TakeoffResult,
)

# Thresholds
MIN_SNAPSHOTS = 60  # ~2 months of daily data
MIN_MONTHLY_VIEWS = 50_000
MIN_GROWTH_PERCENT = 1000.0  # 11x the previous month


def group_views_by_month(snapshots: Sequence[DailySnapshot]) -> List[MonthlyViews]:
    """Sum ``views`` per (year, month), returned in chronological order."""
    views: dict[tuple[int, int], int] = defaultdict(int)
    counts: dict[tuple[int, int], int] = defaultdict(int)
    for s in snapshots:
        key = (s.stat_date.year, s.stat_date.month)
        views[key] += s.views
        counts[key] += 1
    return [
        MonthlyViews(year=y, month=m, views=views[(y, m)], snapshot_count=counts[(y, m)])
        for y, m in sorted(views)
    ]


def find_takeoff(
    months: Sequence[MonthlyViews],
) -> Optional[tuple[MonthlyViews, TakeoffEvent]]:
    """Return the first month meeting both takeoff conditions, if any."""
    for prev, curr in zip(months, months[1:]):
        if curr.views < MIN_MONTHLY_VIEWS or prev.views <= 0:
            continue
        growth = growth_percent(curr.views, prev.views)
        if growth >= MIN_GROWTH_PERCENT:
            return curr, TakeoffEvent(
                month=curr.label,
                month_views=curr.views,
                prior_month_views=prev.views,
                growth_percent=round(growth, 2),
            )
    return None


def detect_takeoff(
    snapshots: Sequence[DailySnapshot],
    created_at: Optional[date] = None,
) -> TakeoffResult:
    """Run the takeoff scan over a channel's full daily history.

    ``days_to_takeoff`` counts from ``created_at`` to the first day of the
    takeoff month and is omitted when the creation date is unknown.
    """
    validate_snapshots(snapshots)
    total = len(snapshots)

    if total < MIN_SNAPSHOTS:
        return TakeoffResult(
            has_taken_off=False,
            reason=TakeoffReason.NOT_ENOUGH_DATA,
            total_days_analyzed=total,
        )

    found = find_takeoff(group_views_by_month(snapshots))
    if found is None:
        return TakeoffResult(
            has_taken_off=False,
            reason=TakeoffReason.CRITERIA_NEVER_MET,
            total_days_analyzed=total,
        )

    bucket, event = found
    takeoff_date = date(bucket.year, bucket.month, 1)
    days_to_takeoff = (takeoff_date - created_at).days if created_at else None

    return TakeoffResult(
        has_taken_off=True,
        month=event.month,
        month_views=event.month_views,
        prior_month_views=event.prior_month_views,
        growth_percent=event.growth_percent,
        takeoff_date=takeoff_date,
        days_to_takeoff=days_to_takeoff,
        total_days_analyzed=total,
    )
