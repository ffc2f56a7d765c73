import json
import logging
from contextlib import contextmanager
from typing import Any, Iterable, Optional

from sqlalchemy import DateTime, bindparam, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from career_ai.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    if url.startswith("postgresql"):
        return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}
    return {}


# Create engine with connection pool
engine = create_engine(
    settings.postgres_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **_engine_kwargs(settings.postgres_url)
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM profiles"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except SQLAlchemyError as e:
        logger.warning("Database connection failed: %s", e)
        return False


# ============================================================
# HELPERS FOR RAW SQL
# ============================================================

# Timestamps are bound and read through this type so PostgreSQL (TIMESTAMPTZ)
# and SQLite (text) round-trip the same values.
TIMESTAMP = DateTime(timezone=True)


def typed_text(sql: str, timestamps: Iterable[str] = (), **columns):
    """
    text() with timestamp bind params and, optionally, typed result columns.
    Usage:
        typed_text("SELECT id, saved_at FROM saved_careers", saved_at=TIMESTAMP)
    """
    stmt = text(sql)
    if timestamps:
        stmt = stmt.bindparams(*[bindparam(name, type_=TIMESTAMP) for name in timestamps])
    if columns:
        return stmt.columns(**columns)
    return stmt


def to_json_param(value: Any) -> Optional[str]:
    """Serialize for a JSONB (PostgreSQL) or TEXT (SQLite) column."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def from_json_column(value: Any, default: Any = None) -> Any:
    """PostgreSQL hands back parsed JSON, SQLite hands back text."""
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Unparseable JSON column value: %.80r", value)
        return default
