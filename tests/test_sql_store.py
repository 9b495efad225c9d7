"""
SQL Snapshot Store Tests

Runs SQLSnapshotStore against in-memory SQLite:
- max_days cutoff relative to the current UTC date
- unknown channels and latest totals
- facade takeoff agrees with the standalone scan on long histories
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from app.analyzer.pipeline import compute_metrics, compute_takeoff
from app.core.errors import DataFetchError
from app.database import _engine_kwargs
from app.models.channel_models import Channel, ChannelDailyStats, ChannelStatistics
from app.store.sql_store import SQLSnapshotStore


def _today():
    return datetime.now(timezone.utc).date()


def _months_back(day: date, months: int) -> date:
    """First day of the month ``months`` before ``day``'s month."""
    index = day.year * 12 + (day.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


def _add_channel(session, channel_id, days, views=100_000, created=None):
    session.add(Channel(channel_id=channel_id, channel_created_date=created))
    for stat_date in days:
        session.add(
            ChannelDailyStats(
                channel_id=channel_id, stat_date=stat_date, views=views, subscribers=10
            )
        )
    session.commit()


# =============================================================================
# History Reads
# =============================================================================

class TestFetchDailySnapshots:

    def test_max_days_cutoff(self, session):
        today = _today()
        _add_channel(
            session,
            "UC_test",
            [today - timedelta(days=d) for d in (400, 366, 365, 10, 0)],
        )
        store = SQLSnapshotStore(session)

        recent = store.fetch_daily_snapshots("UC_test", max_days=365)
        assert [s.stat_date for s in recent] == [
            today - timedelta(days=365),
            today - timedelta(days=10),
            today,
        ]
        assert len(store.fetch_daily_snapshots("UC_test")) == 5

    def test_ascending_order(self, session):
        today = _today()
        _add_channel(session, "UC_test", [today, today - timedelta(days=2)])
        dates = [s.stat_date for s in SQLSnapshotStore(session).fetch_daily_snapshots("UC_test")]
        assert dates == sorted(dates)

    def test_unknown_channel(self, session):
        with pytest.raises(DataFetchError) as exc:
            SQLSnapshotStore(session).fetch_daily_snapshots("UC_missing")
        assert exc.value.not_found is True


class TestFetchTotals:

    def test_latest_statistics_row_wins(self, session):
        _add_channel(session, "UC_test", [])
        session.add(ChannelStatistics(channel_id="UC_test", total_views=10))
        session.add(ChannelStatistics(channel_id="UC_test", total_views=20, total_uploads=4))
        session.commit()

        totals = SQLSnapshotStore(session).fetch_entity_totals("UC_test")
        assert totals.total_views == 20
        assert totals.total_uploads == 4
        assert totals.total_subscribers is None

    def test_no_statistics_yet(self, session):
        _add_channel(session, "UC_test", [])
        assert SQLSnapshotStore(session).fetch_entity_totals("UC_test").total_views is None


# =============================================================================
# Takeoff over Long Histories
# =============================================================================

class TestLongHistoryTakeoff:

    def test_flat_channel_agrees_with_standalone_scan(self, session):
        today = _today()
        start = _months_back(today, 19)
        days = [start + timedelta(days=i) for i in range((today - start).days + 1)]
        _add_channel(session, "UC_flat", days, created=start)
        store = SQLSnapshotStore(session)

        metrics = compute_metrics("UC_flat", store)
        standalone = compute_takeoff("UC_flat", store)

        assert standalone.has_taken_off is False
        assert metrics.takeoff == standalone
        assert metrics.takeoff.total_days_analyzed == len(days)


# =============================================================================
# Engine Configuration
# =============================================================================

class TestEngineKwargs:

    def test_sqlite_allows_cross_thread_sessions(self):
        kwargs = _engine_kwargs("sqlite:///./chanlens.db")
        assert kwargs["connect_args"] == {"check_same_thread": False}
        assert "pool_size" not in kwargs

    def test_postgres_uses_pool(self):
        kwargs = _engine_kwargs("postgresql://user:secret@db:5432/chanlens")
        assert kwargs["pool_pre_ping"] is True
        assert "connect_args" not in kwargs
