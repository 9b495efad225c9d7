"""CHANLENS — Ratio Engine.

Efficiency ratios from a channel's latest lifetime totals.
A zero, None or missing denominator always yields 0.0, never NaN/Inf.
"""

from typing import Optional

from app.models.metrics_models import EntityTotals


def _safe_ratio(numerator: Optional[float], denominator: Optional[float]) -> float:
    if not denominator or denominator <= 0:
        return 0.0
    return (numerator or 0) / denominator


def views_per_subscriber(
    total_views: Optional[int], total_subscribers: Optional[int]
) -> float:
    return _safe_ratio(total_views, total_subscribers)


def views_per_upload(total_views: Optional[int], total_uploads: Optional[int]) -> float:
    return _safe_ratio(total_views, total_uploads)


def subscribers_per_upload(
    total_subscribers: Optional[int], total_uploads: Optional[int]
) -> float:
    return _safe_ratio(total_subscribers, total_uploads)


def compute_ratios(totals: EntityTotals) -> dict[str, float]:
    """All three ratios keyed by their CalculatedMetrics field name."""
    return {
        "views_per_subscriber": round(
            views_per_subscriber(totals.total_views, totals.total_subscribers), 4
        ),
        "views_per_upload": round(
            views_per_upload(totals.total_views, totals.total_uploads), 4
        ),
        "subscribers_per_upload": round(
            subscribers_per_upload(totals.total_subscribers, totals.total_uploads), 4
        ),
    }
