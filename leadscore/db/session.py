"""
leadscore/db/session.py — SQLAlchemy engine and session factory.

Usage:
    from leadscore.db.session import get_session

    with get_session() as db:
        ...
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from leadscore.config import settings


def _engine_options(url: str) -> dict:
    # SQLite's single-connection pools reject the sizing options
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # reconnect on stale connections
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_engine(
    settings.database_url,
    echo=False,                  # set True to log all SQL (useful for debugging)
    **_engine_options(settings.database_url),
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager for scripts and batch jobs."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
