#!/usr/bin/env python
"""Check database connectivity and optionally create the application tables.

Usage:
    python scripts/check_db.py
    python scripts/check_db.py --create-tables
"""

import argparse
import asyncio
import sys

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

import app.main  # noqa: F401  registers every feature's models on Base.metadata
from app.core.config import get_settings
from app.core.database import Base


async def check_database(create_tables: bool) -> int:
    """Verify the connection, then report (or create) the expected tables."""
    settings = get_settings()

    print(f"{settings.app_name} - Database Connectivity Check")
    print("=" * 45)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print()

    engine = create_async_engine(settings.database_url)

    try:
        async with engine.begin() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar() != 1:
                print("[FAIL] Unexpected response to SELECT 1")
                return 1
            print("[OK] Basic connectivity")

            if create_tables:
                await conn.run_sync(Base.metadata.create_all)
                print("[OK] Tables created (existing tables left untouched)")

            existing = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))

        missing = sorted(set(Base.metadata.tables) - existing)
        for table in sorted(Base.metadata.tables):
            marker = "[OK]  " if table in existing else "[MISS]"
            print(f"{marker} table {table}")

        print()
        if missing:
            print("Some tables are missing. Re-run with --create-tables.")
            return 1
        print("Database check completed successfully!")
        return 0

    except SQLAlchemyError as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure PostgreSQL is running")
        print("  2. Check DATABASE_URL in .env file")
        return 1

    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing application tables before checking.",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(check_database(args.create_tables)))


if __name__ == "__main__":
    main()
