"""
Shared pytest fixtures for the CHANLENS test suite.

Provides reusable fixtures for:
- Daily snapshot series builders
- An in-memory SnapshotStore fake
- An in-memory SQLite database wired into the FastAPI app
"""

import calendar
from datetime import date, timedelta
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.errors import DataFetchError
from app.models.metrics_models import DailySnapshot, EntityTotals
from app.store.base_store import SnapshotStore


# =============================================================================
# Snapshot Builders
# =============================================================================

def snap(stat_date: date, views: int, subscribers: int = 0) -> DailySnapshot:
    return DailySnapshot(stat_date=stat_date, views=views, subscribers=subscribers)


def daily_series(start: date, views: List[int], subscribers: Optional[List[int]] = None):
    """One snapshot per consecutive day starting at ``start``."""
    subscribers = subscribers or [0] * len(views)
    return [
        snap(start + timedelta(days=i), v, s)
        for i, (v, s) in enumerate(zip(views, subscribers))
    ]


def monthly_series(year: int, month_sums: List[int]):
    """Daily snapshots for consecutive months whose views sum to ``month_sums``.

    Every day of each month gets a snapshot; the first day carries the
    whole month's sum and the other days carry 0.
    """
    snapshots = []
    y, m = year, 1
    for total in month_sums:
        days = calendar.monthrange(y, m)[1]
        for day in range(1, days + 1):
            snapshots.append(snap(date(y, m, day), total if day == 1 else 0))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return snapshots


# =============================================================================
# In-memory Store
# =============================================================================

class FakeStore(SnapshotStore):
    """SnapshotStore over plain dicts; records requested history lengths.

    ``max_days`` cuts history relative to ``today`` like the SQL store does.
    """

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.snapshots: Dict[str, List[DailySnapshot]] = {}
        self.totals: Dict[str, EntityTotals] = {}
        self.created: Dict[str, Optional[date]] = {}
        self.niches: Dict[str, Optional[str]] = {}
        self.failing: Dict[str, Exception] = {}
        self.requested_days: List[Optional[int]] = []

    def add(self, entity_id, snapshots=(), totals=None, created=None, niche=None):
        self.snapshots[entity_id] = list(snapshots)
        self.totals[entity_id] = totals or EntityTotals()
        self.created[entity_id] = created
        self.niches[entity_id] = niche

    def fetch_daily_snapshots(self, entity_id, max_days=None):
        if entity_id in self.failing:
            raise self.failing[entity_id]
        self.requested_days.append(max_days)
        if entity_id not in self.snapshots:
            raise DataFetchError(f"Channel {entity_id} not found", entity_id, not_found=True)
        snapshots = self.snapshots[entity_id]
        if max_days is not None:
            cutoff = self.today - timedelta(days=max_days)
            snapshots = [s for s in snapshots if s.stat_date >= cutoff]
        return list(snapshots)

    def fetch_entity_totals(self, entity_id):
        return self.totals[entity_id]

    def fetch_entity_creation_date(self, entity_id):
        return self.created[entity_id]

    def list_entity_ids(self, offset=0, limit=None):
        ids = list(self.snapshots)
        return ids[offset:] if limit is None else ids[offset:offset + limit]

    def count_entities(self):
        return len(self.snapshots)

    def fetch_niche_totals(self):
        return [(self.niches[eid], self.totals[eid]) for eid in self.snapshots]


@pytest.fixture
def store():
    """Empty in-memory store."""
    return FakeStore()


# =============================================================================
# Database / API Fixtures
# =============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    from app.models import channel_models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    """TestClient with the DB session overridden and a clean metrics cache."""
    from app.api.deps import metrics_cache
    from app.database import get_session
    from app.main import app

    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    metrics_cache.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    metrics_cache.clear()
