"""CHANLENS — Channel Storage Models.

Pass-through persistence for tracked channels, their latest lifetime totals
and their daily cumulative snapshots. Metrics are never stored here; they are
derived on demand by the analyzer engines.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, UniqueConstraint


class Channel(SQLModel, table=True):
    """A tracked channel.

    ``custom_fields`` is an open, string-keyed map for free-form per-channel
    data. It never flows into computed metrics.
    """

    __tablename__ = "channels"

    id: Optional[int] = Field(default=None, primary_key=True)
    channel_id: str = Field(index=True, unique=True, description="Provider channel ID")
    channel_name: str = Field(default="")
    channel_handle: Optional[str] = None
    channel_niche: Optional[str] = Field(default=None, index=True)
    channel_created_date: Optional[date] = Field(
        default=None, description="When the channel was created on the provider"
    )
    custom_fields: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False, default=dict)
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChannelStatistics(SQLModel, table=True):
    """Lifetime totals as last reported by the provider.

    Append-only: the most recent row per channel is the current snapshot.
    """

    __tablename__ = "channel_statistics"

    id: Optional[int] = Field(default=None, primary_key=True)
    channel_id: str = Field(index=True, foreign_key="channels.channel_id")
    total_views: Optional[int] = None
    total_subscribers: Optional[int] = None
    total_uploads: Optional[int] = None
    snapshot_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChannelDailyStats(SQLModel, table=True):
    """One day's cumulative counters for a channel.

    Unique constraint on (channel_id, stat_date) keeps one row per day;
    re-ingesting a day overwrites it.
    """

    __tablename__ = "channel_daily_stats"
    __table_args__ = (
        UniqueConstraint("channel_id", "stat_date", name="uq_channel_daily_stat"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    channel_id: str = Field(index=True, foreign_key="channels.channel_id")
    stat_date: date = Field(index=True)
    views: int = Field(default=0, description="Cumulative lifetime views")
    subscribers: int = Field(default=0, description="Cumulative lifetime subscribers")
