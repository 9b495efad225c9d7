"""CHANLENS — Shared API Dependencies."""

from fastapi import Depends, HTTPException
from sqlmodel import Session

from app.config import settings
from app.core.cache import TTLCache
from app.core.errors import DataFetchError, InvalidInputError
from app.database import get_session
from app.store.base_store import SnapshotStore
from app.store.sql_store import SQLSnapshotStore

# Process-wide cache for list endpoints; cleared on every write.
metrics_cache = TTLCache(ttl_seconds=settings.metrics_cache_ttl_seconds)


def get_metrics_cache() -> TTLCache:
    return metrics_cache


def get_store(session: Session = Depends(get_session)) -> SnapshotStore:
    return SQLSnapshotStore(session)


def to_http_error(e: Exception) -> HTTPException:
    """Translate engine errors into user-facing HTTP errors."""
    if isinstance(e, DataFetchError):
        status = 404 if e.not_found else 502
        return HTTPException(status_code=status, detail=str(e))
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=422, detail=f"Invalid channel data: {e}")
    return HTTPException(status_code=500, detail=f"Metrics failed: {e}")
