#!/usr/bin/env python3
"""Seed the database with demo users, articles and videos.

Usage:
    python -m scripts.seed_content
    # or from project root:
    python scripts/seed_content.py
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from quota_gate.common.config import get_settings
from quota_gate.common.database import DatabaseManager
from quota_gate.seed import USER_SEEDS, seed_demo_data


async def seed_content() -> None:
    db = DatabaseManager(get_settings())
    await db.init()
    await db.create_all()

    async with db.get_session() as session:
        created = await seed_demo_data(session)

    await db.close()
    for kind, count in created.items():
        print(f"  [created] {count} {kind}")
    print("\nDemo logins:")
    for email, _, tier in USER_SEEDS:
        print(f"  {email} (tier {tier})")


if __name__ == "__main__":
    asyncio.run(seed_content())
