"""
tests/conftest.py — Shared pytest configuration and fixtures.

Sets environment variables BEFORE any leadscore module is imported, so the
settings singleton never picks up a developer's .env / real database.
"""

import os
from datetime import datetime, timezone

import pytest

# ── Set env vars before any leadscore module is imported ─────────────────────
# This runs at collection time, before tests execute.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leadscore.db.models import Base

# Fixed reference time for every time-dependent test
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def db():
    """Provide a fresh in-memory SQLite session for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()
