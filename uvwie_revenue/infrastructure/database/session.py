"""Database engine and per-request sessions"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from uvwie_revenue.config import settings


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the revenue database.

    PostgreSQL gets a bounded pool recycled hourly; SQLite (local runs, tests)
    is opened so sessions can move between the event loop and the threadpool.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; uncommitted work is discarded on close"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
