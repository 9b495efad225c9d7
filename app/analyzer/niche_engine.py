"""CHANLENS — Niche Engine.

Groups channels by niche and compares their lifetime totals.
"""

from collections import defaultdict
from typing import Iterable, List, Optional, Tuple

from app.analyzer.ratio_engine import views_per_subscriber
from app.models.metrics_models import EntityTotals, NicheSummary

UNKNOWN_NICHE = "Unknown"


def compute_niche_comparison(
    rows: Iterable[Tuple[Optional[str], EntityTotals]],
) -> List[NicheSummary]:
    """Aggregate (niche, totals) rows into one summary per niche."""
    views: dict[str, int] = defaultdict(int)
    subscribers: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)

    for niche, totals in rows:
        key = niche or UNKNOWN_NICHE
        views[key] += totals.total_views or 0
        subscribers[key] += totals.total_subscribers or 0
        counts[key] += 1

    return [
        NicheSummary(
            niche=niche,
            channel_count=counts[niche],
            total_views=views[niche],
            total_subscribers=subscribers[niche],
            average_views_per_subscriber=round(
                views_per_subscriber(views[niche], subscribers[niche]), 4
            ),
            average_views_per_channel=round(views[niche] / counts[niche], 2),
            average_subscribers_per_channel=round(
                subscribers[niche] / counts[niche], 2
            ),
        )
        for niche in sorted(counts)
    ]


def top_niche(summaries: List[NicheSummary]) -> Optional[NicheSummary]:
    """Niche with the highest average views per subscriber."""
    if not summaries:
        return None
    return max(summaries, key=lambda s: s.average_views_per_subscriber)
