"""CHANLENS — Metrics Models.

Inputs read from the snapshot store and the derived, never-persisted
output of the analyzer engines.
"""

from datetime import date
from enum import Enum
from typing import Optional, List, Union
from pydantic import BaseModel, Field


# ─────────────────────────────────────────────
# INPUTS — read from the snapshot store
# ─────────────────────────────────────────────


class DailySnapshot(BaseModel):
    """One day's cumulative lifetime counters for an entity."""

    stat_date: date
    views: int = Field(default=0, ge=0)
    subscribers: int = Field(default=0, ge=0)


class EntityTotals(BaseModel):
    """Latest lifetime totals. Fields the provider did not report are None."""

    total_views: Optional[int] = None
    total_subscribers: Optional[int] = None
    total_uploads: Optional[int] = None


# ─────────────────────────────────────────────
# DERIVED — window sums, deltas, takeoff
# ─────────────────────────────────────────────


class WindowedViews(BaseModel):
    """Sum of the cumulative ``views`` values sampled inside a window."""

    window_days: int
    window_start: date
    window_end: date
    sum_views: int = 0


class GrowthDelta(BaseModel):
    """Current window vs. the immediately preceding window of equal length."""

    current_window_sum: Union[int, float] = 0
    previous_window_sum: Union[int, float] = 0
    absolute_change: Union[int, float] = 0
    percent_change: float = 0  # 0 when there is no prior baseline


class WindowGrowth(BaseModel):
    """Both windows and their delta for one standard window size."""

    window_days: int
    current: WindowedViews
    previous: WindowedViews
    delta: GrowthDelta


class PeriodGrowth(BaseModel):
    """Counters gained between the first and last snapshot of a period.

    Unlike the window sums these are true differences of the cumulative
    counters; percents are relative to the period's first snapshot.
    """

    period_days: int
    subscribers_change: int = 0
    subscribers_change_percent: float = 0.0
    views_change: int = 0
    views_change_percent: float = 0.0


class MonthlyViews(BaseModel):
    """Calendar-month bucket of summed ``views`` values."""

    year: int
    month: int
    views: int = 0
    snapshot_count: int = 0

    @property
    def label(self) -> str:
        return f"{self.year}-{self.month:02d}"


class TakeoffReason(str, Enum):
    """Why no takeoff was reported."""

    NOT_ENOUGH_DATA = "not enough data"
    CRITERIA_NEVER_MET = "criteria never met"


class TakeoffEvent(BaseModel):
    """The earliest month that qualified as a breakout."""

    month: str  # YYYY-MM
    month_views: int
    prior_month_views: int
    growth_percent: float


class TakeoffResult(BaseModel):
    """Outcome of the takeoff scan: either a detected event or a reason."""

    has_taken_off: bool = False
    reason: Optional[TakeoffReason] = None
    month: Optional[str] = None
    month_views: Optional[int] = None
    prior_month_views: Optional[int] = None
    growth_percent: Optional[float] = None
    takeoff_date: Optional[date] = None
    days_to_takeoff: Optional[int] = None
    total_days_analyzed: int = 0


class CalculatedMetrics(BaseModel):
    """Composite per-entity metrics record returned to the API layer."""

    entity_id: str
    as_of: date
    views_last_3_days: int = 0
    views_last_7_days: int = 0
    views_last_30_days: int = 0
    views_delta_3_days_percent: float = 0.0
    views_delta_7_days_percent: float = 0.0
    views_delta_30_days_percent: float = 0.0
    views_per_subscriber: float = 0.0
    views_per_upload: float = 0.0
    subscribers_per_upload: float = 0.0
    uploads_last_30_days: int = 0
    # Providers never report per-day uploads; the figure above is a
    # linear extrapolation from lifetime totals, never a measurement.
    uploads_last_30_days_estimated: bool = True
    average_daily_views: int = 0
    average_daily_subscribers_gained: int = 0
    growth: List[WindowGrowth] = []
    period_growth: PeriodGrowth = PeriodGrowth(period_days=30)
    takeoff: TakeoffResult = TakeoffResult(reason=TakeoffReason.NOT_ENOUGH_DATA)


# ─────────────────────────────────────────────
# CROSS-ENTITY — niche comparison & dashboard
# ─────────────────────────────────────────────


class NicheSummary(BaseModel):
    """Aggregate lifetime totals for all channels in one niche."""

    niche: str
    channel_count: int = 0
    total_views: int = 0
    total_subscribers: int = 0
    average_views_per_subscriber: float = 0.0
    average_views_per_channel: float = 0.0
    average_subscribers_per_channel: float = 0.0


class DashboardOverview(BaseModel):
    """Dashboard-wide roll-up of every tracked channel."""

    as_of: date
    total_channels: int = 0
    total_views: int = 0
    total_subscribers: int = 0
    average_views_delta_30_days_percent: float = 0.0
    total_subscribers_growth: int = 0
    total_views_growth: int = 0
    average_subscribers_growth_percent: float = 0.0
    average_views_growth_percent: float = 0.0
    channels_taken_off: int = 0
    top_performing_niche: Optional[NicheSummary] = None
    niche_comparison: List[NicheSummary] = []
    channels: List[CalculatedMetrics] = []
