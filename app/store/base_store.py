"""CHANLENS — Abstract Snapshot Store."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from app.models.metrics_models import DailySnapshot, EntityTotals


class SnapshotStore(ABC):
    """Read-side port the metrics engine pulls channel data through.

    Implementations raise ``DataFetchError`` when data cannot be fetched.
    An entity with no rows is not an error: return empty/None values.
    """

    @abstractmethod
    def fetch_daily_snapshots(
        self, entity_id: str, max_days: Optional[int] = None
    ) -> List[DailySnapshot]:
        """Return snapshots in ascending date order, one per date.

        Args:
            entity_id: Provider channel ID.
            max_days: Only return the trailing ``max_days`` days of history.
                      None returns the full history.
        """
        ...

    @abstractmethod
    def fetch_entity_totals(self, entity_id: str) -> EntityTotals:
        """Return the latest lifetime totals (fields may be None)."""
        ...

    @abstractmethod
    def fetch_entity_creation_date(self, entity_id: str) -> Optional[date]:
        """Return the channel's creation date, or None if unknown."""
        ...

    @abstractmethod
    def list_entity_ids(self, offset: int = 0, limit: Optional[int] = None) -> List[str]:
        """Return tracked channel IDs, newest first."""
        ...

    @abstractmethod
    def count_entities(self) -> int:
        ...

    @abstractmethod
    def fetch_niche_totals(self) -> List[Tuple[Optional[str], EntityTotals]]:
        """Return (niche, latest totals) for every tracked channel."""
        ...
