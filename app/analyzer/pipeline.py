"""CHANLENS — Metrics Pipeline (Facade).

Runs the full per-channel derivation:
  fetch history + totals → window sums → deltas → ratios → upload estimate → takeoff

Takeoff always sees the full history; a cut-off history starts with a
partial month that reads as a breakout. Daily averages use only the
trailing ``history_days``.

Missing or sparse data never raises: an empty history yields an all-zero
record. Malformed history raises InvalidInputError; store failures surface
as DataFetchError.
"""

import math
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Sequence

from app.config import settings
from app.analyzer.delta_engine import compute_delta, compute_period_growth
from app.analyzer.niche_engine import compute_niche_comparison, top_niche
from app.analyzer.ratio_engine import compute_ratios
from app.analyzer.takeoff_engine import detect_takeoff
from app.analyzer.window_engine import (
    STANDARD_WINDOWS,
    average_daily_change,
    validate_snapshots,
    windowed_views,
)
from app.core.errors import DataFetchError
from app.core.logging import get_logger
from app.models.metrics_models import (
    CalculatedMetrics,
    DailySnapshot,
    DashboardOverview,
    EntityTotals,
    TakeoffResult,
    WindowGrowth,
)
from app.store.base_store import SnapshotStore

logger = get_logger("analyzer.pipeline")

UPLOAD_ESTIMATE_DAYS = 30
GROWTH_PERIOD_DAYS = 30


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _fetch(entity_id: str, what: str, fn: Callable[..., Any], *args: Any) -> Any:
    """Call a store method, normalising any failure to DataFetchError."""
    try:
        return fn(*args)
    except DataFetchError:
        raise
    except Exception as e:
        raise DataFetchError(
            f"Failed to fetch {what} for {entity_id}: {e}", entity_id=entity_id
        ) from e


def estimate_uploads_last_30_days(
    total_uploads: Optional[int],
    created_at: Optional[date],
    today: date,
) -> int:
    """Extrapolate recent uploads from the lifetime upload rate.

    The provider never reports per-day upload counts, so this is
    ``floor(total_uploads / days_since_creation * 30)``, an estimate only.
    """
    if not total_uploads or created_at is None:
        return 0
    days_alive = (today - created_at).days
    if days_alive <= 0:
        return 0
    return math.floor(total_uploads / days_alive * UPLOAD_ESTIMATE_DAYS)


def compute_metrics_from_history(
    entity_id: str,
    snapshots: Sequence[DailySnapshot],
    totals: EntityTotals,
    created_at: Optional[date] = None,
    today: Optional[date] = None,
    history_days: Optional[int] = None,
) -> CalculatedMetrics:
    """Derive the full metrics record from already-fetched data.

    ``snapshots`` should be the entity's full history. When ``history_days``
    is set, the daily averages only look at that many trailing days.
    """
    today = today or _today()
    snapshots = list(snapshots)
    validate_snapshots(snapshots)

    # No history yet — all-zero record, not an error
    if not snapshots:
        return CalculatedMetrics(entity_id=entity_id, as_of=today)

    recent = snapshots
    if history_days is not None:
        cutoff = today - timedelta(days=history_days)
        recent = [s for s in snapshots if s.stat_date >= cutoff]

    window_fields: dict[str, Any] = {}
    growth: List[WindowGrowth] = []
    for days in STANDARD_WINDOWS:
        current = windowed_views(snapshots, today, days)
        previous = windowed_views(snapshots, today, days, previous=True)
        delta = compute_delta(current.sum_views, previous.sum_views)
        growth.append(
            WindowGrowth(window_days=days, current=current, previous=previous, delta=delta)
        )
        window_fields[f"views_last_{days}_days"] = current.sum_views
        window_fields[f"views_delta_{days}_days_percent"] = round(
            delta.percent_change, 2
        )

    return CalculatedMetrics(
        entity_id=entity_id,
        as_of=today,
        **window_fields,
        **compute_ratios(totals),
        uploads_last_30_days=estimate_uploads_last_30_days(
            totals.total_uploads, created_at, today
        ),
        uploads_last_30_days_estimated=True,
        average_daily_views=average_daily_change(recent, "views"),
        average_daily_subscribers_gained=average_daily_change(recent, "subscribers"),
        growth=growth,
        period_growth=compute_period_growth(snapshots, today, GROWTH_PERIOD_DAYS),
        takeoff=detect_takeoff(snapshots, created_at),
    )


def compute_metrics(
    entity_id: str,
    store: SnapshotStore,
    today: Optional[date] = None,
) -> CalculatedMetrics:
    """Fetch one channel's data and compute its CalculatedMetrics."""
    started = time.perf_counter()

    snapshots = _fetch(
        entity_id, "daily snapshots", store.fetch_daily_snapshots, entity_id, None
    )
    totals = _fetch(entity_id, "totals", store.fetch_entity_totals, entity_id)
    created_at = _fetch(
        entity_id, "creation date", store.fetch_entity_creation_date, entity_id
    )

    metrics = compute_metrics_from_history(
        entity_id, snapshots, totals, created_at, today, settings.history_days
    )

    logger.info(
        f"Computed metrics for {entity_id} from {len(snapshots)} snapshots "
        f"(takeoff={metrics.takeoff.has_taken_off})",
        extra={
            "entity_id": entity_id,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return metrics


def compute_takeoff(entity_id: str, store: SnapshotStore) -> TakeoffResult:
    """Run only the takeoff scan, over the channel's full history."""
    snapshots = _fetch(
        entity_id, "daily snapshots", store.fetch_daily_snapshots, entity_id, None
    )
    created_at = _fetch(
        entity_id, "creation date", store.fetch_entity_creation_date, entity_id
    )
    result = detect_takeoff(snapshots, created_at)
    if result.has_taken_off:
        logger.info(
            f"Takeoff detected for {entity_id} in {result.month} "
            f"({result.growth_percent}% growth)",
            extra={"entity_id": entity_id},
        )
    return result


def compute_dashboard_overview(
    store: SnapshotStore,
    today: Optional[date] = None,
) -> DashboardOverview:
    """Roll every tracked channel up into one dashboard view."""
    today = today or _today()
    entity_ids = _fetch("*", "channel list", store.list_entity_ids)
    channels = [compute_metrics(eid, store, today) for eid in entity_ids]

    niche_rows = _fetch("*", "niche totals", store.fetch_niche_totals)
    niches = compute_niche_comparison(niche_rows)

    def _average(values: List[float]) -> float:
        return round(sum(values) / len(values), 2) if values else 0.0

    growths = [m.period_growth for m in channels]

    overview = DashboardOverview(
        as_of=today,
        total_channels=len(channels),
        total_views=sum(t.total_views or 0 for _, t in niche_rows),
        total_subscribers=sum(t.total_subscribers or 0 for _, t in niche_rows),
        average_views_delta_30_days_percent=_average(
            [m.views_delta_30_days_percent for m in channels]
        ),
        total_subscribers_growth=sum(g.subscribers_change for g in growths),
        total_views_growth=sum(g.views_change for g in growths),
        average_subscribers_growth_percent=_average(
            [g.subscribers_change_percent for g in growths]
        ),
        average_views_growth_percent=_average([g.views_change_percent for g in growths]),
        channels_taken_off=sum(1 for m in channels if m.takeoff.has_taken_off),
        top_performing_niche=top_niche(niches),
        niche_comparison=niches,
        channels=channels,
    )
    logger.info(
        f"Dashboard overview built for {overview.total_channels} channels "
        f"({len(niches)} niches)"
    )
    return overview
