"""
scripts/setup_db.py — Create (or rebuild) the lead read-model tables.

Usage:
    python scripts/setup_db.py            # create missing tables
    python scripts/setup_db.py --reset    # drop and recreate everything (destroys data)
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import inspect, text

from leadscore.config import settings
from leadscore.db.models import Base
from leadscore.db.session import engine


def setup_db(reset: bool = False) -> int:
    print(f"🔌 Connecting to {settings.database_url[:40]}...")
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    if reset:
        print("🧨 Dropping existing scoring tables...")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)

    found = set(inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - found)
    if missing:
        print(f"❌ Tables still missing: {missing}")
        return 1

    print(f"✅ Read model ready: {sorted(Base.metadata.tables)}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Create the lead scoring tables.")
    parser.add_argument(
        "--reset", action="store_true",
        help="Drop all tables first (destroys stored leads and scores)",
    )
    args = parser.parse_args()
    sys.exit(setup_db(reset=args.reset))


if __name__ == "__main__":
    main()
