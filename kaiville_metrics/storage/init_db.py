# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Database Initialization — Create the research_analytics table.

Usage:
    python -m kaiville_metrics.storage.init_db
    python -m kaiville_metrics.storage.init_db --with-content   # local dev only
"""

import asyncio
import sys

from kaiville_metrics.storage.database import create_database


async def main(include_content: bool = False):
    """Create engine-owned tables (and the content tables for a dev database)."""
    db = create_database()
    what = "metric and content tables" if include_content else "metric tables"
    print(f"[init_db] Creating {what} ({db.dialect})...")
    try:
        await db.create_tables(include_content=include_content)
    finally:
        await db.close()
    print("[init_db] Done.")


if __name__ == "__main__":
    asyncio.run(main(include_content="--with-content" in sys.argv[1:]))
