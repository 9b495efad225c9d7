"""CHANLENS — Database Engine & Session Factory."""

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy import text
from app.config import settings
from app.core.logging import get_logger
from app.models import channel_models  # noqa: F401  (registers tables)

logger = get_logger("database")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"echo": False, "connect_args": {"check_same_thread": False}}
    return {
        "echo": False,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
    }


db_url = settings.effective_database_url
engine = create_engine(db_url, **_engine_kwargs(db_url))
logger.info(f"Database backend: {engine.dialect.name}")


def test_connection() -> bool:
    """Check the database connection with SELECT 1."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        return False


def init_db() -> None:
    """Create the channel tables."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_session():
    """Dependency — yields a DB session."""
    with Session(engine) as session:
        yield session
