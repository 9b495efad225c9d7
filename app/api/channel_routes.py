"""CHANLENS — Channel Data API Routes.

Pass-through writes for channels, their lifetime totals and daily
snapshots. Every write clears the metrics cache.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from app.api.deps import get_metrics_cache
from app.core.cache import TTLCache
from app.core.logging import get_logger
from app.database import get_session
from app.models.channel_models import Channel, ChannelDailyStats, ChannelStatistics
from app.models.metrics_models import DailySnapshot, EntityTotals

logger = get_logger("api.channels")

router = APIRouter(prefix="/channels", tags=["Channels"])


# ── Request Models ──


class ChannelCreateRequest(BaseModel):
    """Request body for POST /channels."""

    channel_id: str
    channel_name: str = ""
    channel_handle: Optional[str] = None
    channel_niche: Optional[str] = None
    channel_created_date: Optional[date] = None
    custom_fields: Dict[str, Any] = {}


class DailyStatsRequest(BaseModel):
    """Request body for POST /channels/{channel_id}/daily-stats."""

    snapshots: List[DailySnapshot]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "snapshots": [
                        {"stat_date": "2026-02-01", "views": 120400, "subscribers": 3100},
                        {"stat_date": "2026-02-02", "views": 121900, "subscribers": 3112},
                    ]
                }
            ]
        }
    }


def _require_channel(session: Session, channel_id: str) -> Channel:
    channel = session.exec(
        select(Channel).where(Channel.channel_id == channel_id)
    ).first()
    if channel is None:
        raise HTTPException(status_code=404, detail=f"Channel {channel_id} not found")
    return channel


# ── Endpoints ──


@router.post("", status_code=201)
async def create_channel(
    request: ChannelCreateRequest,
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_metrics_cache),
):
    """Start tracking a channel."""
    existing = session.exec(
        select(Channel).where(Channel.channel_id == request.channel_id)
    ).first()
    if existing:
        raise HTTPException(
            status_code=409, detail=f"Channel {request.channel_id} already exists"
        )

    channel = Channel(**request.model_dump())
    session.add(channel)
    session.commit()
    session.refresh(channel)
    cache.clear()

    logger.info(f"Channel {channel.channel_id} created", extra={"entity_id": channel.channel_id})
    return {"status": "success", "channel": channel}


@router.get("/{channel_id}")
async def get_channel(channel_id: str, session: Session = Depends(get_session)):
    """Channel profile, including free-form custom fields."""
    return {"status": "success", "channel": _require_channel(session, channel_id)}


@router.post("/{channel_id}/daily-stats")
async def ingest_daily_stats(
    channel_id: str,
    request: DailyStatsRequest,
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_metrics_cache),
):
    """Upsert daily cumulative snapshots; one row per (channel, date)."""
    _require_channel(session, channel_id)

    # Last value wins when the payload repeats a date
    by_date = {s.stat_date: s for s in request.snapshots}
    created = updated = 0
    for stat_date, snap in by_date.items():
        existing = session.exec(
            select(ChannelDailyStats).where(
                ChannelDailyStats.channel_id == channel_id,
                ChannelDailyStats.stat_date == stat_date,
            )
        ).first()
        if existing:
            existing.views = snap.views
            existing.subscribers = snap.subscribers
            session.add(existing)
            updated += 1
        else:
            session.add(
                ChannelDailyStats(
                    channel_id=channel_id,
                    stat_date=stat_date,
                    views=snap.views,
                    subscribers=snap.subscribers,
                )
            )
            created += 1

    session.commit()
    cache.clear()

    logger.info(
        f"Ingested {len(by_date)} daily stats for {channel_id} "
        f"({created} new, {updated} updated)",
        extra={"entity_id": channel_id},
    )
    return {"status": "success", "created": created, "updated": updated}


@router.put("/{channel_id}/statistics")
async def update_channel_statistics(
    channel_id: str,
    totals: EntityTotals,
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_metrics_cache),
):
    """Record the channel's latest lifetime totals."""
    _require_channel(session, channel_id)

    stats = ChannelStatistics(channel_id=channel_id, **totals.model_dump())
    session.add(stats)
    session.commit()
    cache.clear()

    logger.info(f"Statistics updated for {channel_id}", extra={"entity_id": channel_id})
    return {"status": "success", "statistics": totals}
