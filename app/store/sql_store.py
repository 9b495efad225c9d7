"""CHANLENS — SQLModel Snapshot Store.

Reads channel history and totals from the database. Every SQLAlchemy
failure surfaces as ``DataFetchError`` so API handlers translate one error
type.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import DataFetchError
from app.core.logging import get_logger
from app.models.channel_models import Channel, ChannelDailyStats, ChannelStatistics
from app.models.metrics_models import DailySnapshot, EntityTotals
from app.store.base_store import SnapshotStore

logger = get_logger("store.sql")


class SQLSnapshotStore(SnapshotStore):
    """SnapshotStore backed by the ``channels*`` tables."""

    def __init__(self, session: Session):
        self.session = session

    def _get_channel(self, entity_id: str) -> Channel:
        channel = self.session.exec(
            select(Channel).where(Channel.channel_id == entity_id)
        ).first()
        if channel is None:
            raise DataFetchError(
                f"Channel {entity_id} not found", entity_id=entity_id, not_found=True
            )
        return channel

    def _latest_statistics(self, entity_id: str) -> Optional[ChannelStatistics]:
        return self.session.exec(
            select(ChannelStatistics)
            .where(ChannelStatistics.channel_id == entity_id)
            .order_by(ChannelStatistics.snapshot_at.desc(), ChannelStatistics.id.desc())  # type: ignore
            .limit(1)
        ).first()

    # ── Per-entity reads ──

    def fetch_daily_snapshots(
        self, entity_id: str, max_days: Optional[int] = None
    ) -> List[DailySnapshot]:
        try:
            self._get_channel(entity_id)
            query = (
                select(ChannelDailyStats)
                .where(ChannelDailyStats.channel_id == entity_id)
                .order_by(ChannelDailyStats.stat_date)
            )
            if max_days is not None:
                cutoff = datetime.now(timezone.utc).date() - timedelta(days=max_days)
                query = query.where(ChannelDailyStats.stat_date >= cutoff)
            rows = self.session.exec(query).all()
        except SQLAlchemyError as e:
            logger.error(f"Daily stats fetch failed for {entity_id}: {e}")
            raise DataFetchError(
                f"Failed to fetch daily stats for {entity_id}", entity_id=entity_id
            ) from e

        return [
            DailySnapshot(stat_date=r.stat_date, views=r.views, subscribers=r.subscribers)
            for r in rows
        ]

    def fetch_entity_totals(self, entity_id: str) -> EntityTotals:
        try:
            self._get_channel(entity_id)
            stats = self._latest_statistics(entity_id)
        except SQLAlchemyError as e:
            logger.error(f"Statistics fetch failed for {entity_id}: {e}")
            raise DataFetchError(
                f"Failed to fetch statistics for {entity_id}", entity_id=entity_id
            ) from e

        if stats is None:
            return EntityTotals()
        return EntityTotals(
            total_views=stats.total_views,
            total_subscribers=stats.total_subscribers,
            total_uploads=stats.total_uploads,
        )

    def fetch_entity_creation_date(self, entity_id: str) -> Optional[date]:
        try:
            return self._get_channel(entity_id).channel_created_date
        except SQLAlchemyError as e:
            raise DataFetchError(
                f"Failed to fetch channel {entity_id}", entity_id=entity_id
            ) from e

    # ── Cross-entity reads ──

    def list_entity_ids(self, offset: int = 0, limit: Optional[int] = None) -> List[str]:
        query = (
            select(Channel.channel_id)
            .order_by(Channel.created_at.desc(), Channel.id.desc())  # type: ignore
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            return list(self.session.exec(query).all())
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to list channels") from e

    def count_entities(self) -> int:
        try:
            return self.session.exec(select(func.count()).select_from(Channel)).one()
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to count channels") from e

    def fetch_niche_totals(self) -> List[Tuple[Optional[str], EntityTotals]]:
        try:
            channels = self.session.exec(select(Channel)).all()
            rows = []
            for channel in channels:
                stats = self._latest_statistics(channel.channel_id)
                totals = (
                    EntityTotals(
                        total_views=stats.total_views,
                        total_subscribers=stats.total_subscribers,
                        total_uploads=stats.total_uploads,
                    )
                    if stats
                    else EntityTotals()
                )
                rows.append((channel.channel_niche, totals))
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to fetch niche totals") from e

        logger.info(f"Fetched niche totals for {len(rows)} channels")
        return rows
