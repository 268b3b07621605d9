"""
Quai Antique API — Demo Data Fixtures
=======================================

What:  Seeds the database with demo restaurants for local development.
How:   `python -m app.fixtures [count]` creates the tables if needed and
       inserts `count` restaurants (default 20) in one transaction.
"""

import asyncio
import logging
import random
import sys
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base, async_session_factory, dispose_engine, engine
from app.models import catalog, user  # noqa: F401  (register tables on Base.metadata)
from app.models.catalog import Restaurant

logger = logging.getLogger(__name__)

RESTAURANT_FIXTURE_COUNT = 20


async def load_restaurant_fixtures(
    session: AsyncSession,
    count: int = RESTAURANT_FIXTURE_COUNT,
) -> List[Restaurant]:
    """Add `count` demo restaurants to the session and flush them."""
    restaurants = [
        Restaurant(
            name=f"Restaurant n°{i}",
            description=f"Description resto {i}",
            am_opening_time=[],
            pm_opening_time=[],
            max_guest=random.randint(10, 50),
        )
        for i in range(1, count + 1)
    ]
    session.add_all(restaurants)
    await session.flush()
    logger.info("Loaded %d restaurant fixtures", len(restaurants))
    return restaurants


async def main(count: int = RESTAURANT_FIXTURE_COUNT) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_factory() as session:
        async with session.begin():
            await load_restaurant_fixtures(session, count)
    await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else RESTAURANT_FIXTURE_COUNT))
