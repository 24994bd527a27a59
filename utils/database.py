"""
Database utilities and engine management.

This module provides the core database engine that can be used by any layer:
- API routes
- Services
- Automation tasks
- Repositories
- Scripts

No dependencies on higher-level modules (api, services, automation).
"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session

from config.settings import settings


def _normalize_url(db_url: str) -> str:
    # Convert postgresql:// to postgresql+psycopg:// for psycopg3 driver
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return db_url


@lru_cache()
def get_engine() -> Engine:
    """
    Get cached database engine.

    Returns:
        SQLAlchemy engine singleton

    Raises:
        ValueError: If DATABASE_URL is not configured

    Note:
        Uses psycopg (v3) driver for compatibility with PgBouncer/connection poolers.
        SQLite URLs (local development) skip the pooler settings.
    """
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL is not configured")

    db_url = _normalize_url(settings.DATABASE_URL)

    if db_url.startswith("sqlite"):
        return create_engine(db_url, connect_args={"check_same_thread": False})

    engine = create_engine(
        db_url,
        connect_args={
            "prepare_threshold": None,  # Disable prepared statements for pooler compatibility
            "connect_timeout": 10,      # Fail fast if the pooler is slow
        },
        pool_pre_ping=True,  # Verify connection before use
        pool_recycle=300,
        pool_size=3,
        max_overflow=2,
        pool_timeout=30,     # Wait up to 30s for a connection from pool
    )

    # Set statement_timeout after connection is established
    @event.listens_for(engine, "connect")
    def set_statement_timeout(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("SET statement_timeout = '15000'")
        cursor.close()

    return engine


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields:
        SQLModel Session that auto-closes after request

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            ...
    """
    engine = get_engine()
    with Session(engine) as session:
        yield session
