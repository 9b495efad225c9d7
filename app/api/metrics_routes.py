"""CHANLENS — Metrics API Routes."""

import math

from fastapi import APIRouter, Depends, Query

from app.analyzer.niche_engine import compute_niche_comparison
from app.analyzer.pipeline import (
    compute_dashboard_overview,
    compute_metrics,
    compute_takeoff,
)
from app.api.deps import get_metrics_cache, get_store, to_http_error
from app.config import settings
from app.core.cache import TTLCache
from app.core.errors import ChanlensError
from app.core.logging import get_logger
from app.store.base_store import SnapshotStore

logger = get_logger("api.metrics")

router = APIRouter(tags=["Metrics"])


@router.get("/channels/metrics")
async def list_channel_metrics(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    store: SnapshotStore = Depends(get_store),
    cache: TTLCache = Depends(get_metrics_cache),
):
    """Paginated channels with their calculated metrics (briefly cached)."""
    key = ("channel-metrics", page, limit)
    cached = cache.get(key)
    if cached is not None:
        logger.info(f"Cache hit for page {page}", extra={"cache": "hit"})
        return cached

    try:
        total = store.count_entities()
        entity_ids = store.list_entity_ids(offset=(page - 1) * limit, limit=limit)
        channels = [compute_metrics(eid, store) for eid in entity_ids]
    except ChanlensError as e:
        logger.error(f"Channel metrics listing failed: {e}")
        raise to_http_error(e)

    response = {
        "status": "success",
        "page": page,
        "total": total,
        "total_pages": math.ceil(total / limit),
        "channels": [m.model_dump(mode="json") for m in channels],
    }
    cache.set(key, response)
    return response


@router.get("/channels/takeoff")
async def list_taken_off_channels(store: SnapshotStore = Depends(get_store)):
    """Every channel whose history contains a takeoff month."""
    try:
        results = [(eid, compute_takeoff(eid, store)) for eid in store.list_entity_ids()]
    except ChanlensError as e:
        logger.error(f"Takeoff scan failed: {e}")
        raise to_http_error(e)

    taken_off = [
        {"channel_id": eid, "takeoff": result.model_dump(mode="json")}
        for eid, result in results
        if result.has_taken_off
    ]
    return {"status": "success", "count": len(taken_off), "channels": taken_off}


@router.get("/channels/{channel_id}/metrics")
async def get_channel_metrics(
    channel_id: str, store: SnapshotStore = Depends(get_store)
):
    """Window sums, deltas, ratios and takeoff status for one channel."""
    try:
        metrics = compute_metrics(channel_id, store)
    except ChanlensError as e:
        logger.error(f"Metrics failed for {channel_id}: {e}", extra={"entity_id": channel_id})
        raise to_http_error(e)
    return {"status": "success", "metrics": metrics}


@router.get("/channels/{channel_id}/takeoff")
async def get_channel_takeoff(
    channel_id: str, store: SnapshotStore = Depends(get_store)
):
    """Takeoff scan over the channel's full daily history."""
    try:
        result = compute_takeoff(channel_id, store)
    except ChanlensError as e:
        logger.error(f"Takeoff failed for {channel_id}: {e}", extra={"entity_id": channel_id})
        raise to_http_error(e)
    return {"status": "success", "channel_id": channel_id, "takeoff": result}


@router.get("/analytics/niche-comparison")
async def get_niche_comparison(store: SnapshotStore = Depends(get_store)):
    """Lifetime totals aggregated per niche."""
    try:
        niches = compute_niche_comparison(store.fetch_niche_totals())
    except ChanlensError as e:
        raise to_http_error(e)
    return {"status": "success", "niches": niches}


@router.get("/analytics/dashboard")
async def get_dashboard(store: SnapshotStore = Depends(get_store)):
    """Dashboard-wide roll-up of every tracked channel."""
    try:
        overview = compute_dashboard_overview(store)
    except ChanlensError as e:
        logger.error(f"Dashboard overview failed: {e}")
        raise to_http_error(e)
    return {"status": "success", "overview": overview}
