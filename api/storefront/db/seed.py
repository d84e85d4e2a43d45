from __future__ import annotations

import asyncio
import logging
import random

from sqlalchemy import delete

from storefront.core.logging import configure_logging
from storefront.db.base import Base
from storefront.db.models import Store
from storefront.db.session import _async_engine, async_transaction

logger = logging.getLogger(__name__)

# Central Seoul; demo stores are scattered within ~5 km of it.
CENTER_LAT, CENTER_LON = 37.5665, 126.9780
OWNERS = ["owner-demo-1", "owner-demo-2"]
STORE_NAMES = [
    "Kimbap Corner",
    "Tteokbokki House",
    "Bibimbap Kitchen",
    "Jjigae Table",
    "Mandu Bar",
    "Naengmyeon Place",
]


def build_demo_stores(rng: random.Random) -> list[Store]:
    stores = []
    for index, name in enumerate(STORE_NAMES):
        stores.append(
            Store(
                owner_id=OWNERS[index % len(OWNERS)],
                name=name,
                description=f"{name} demo store",
                address=f"{index + 1} Sejong-daero, Jung-gu, Seoul",
                phone=f"02-000-{1000 + index}",
                business_hours="10:00-22:00",
                latitude=CENTER_LAT + rng.uniform(-0.04, 0.04),
                longitude=CENTER_LON + rng.uniform(-0.05, 0.05),
            )
        )
    # One store without coordinates, to exercise the "excluded from distance sorting" path.
    stores.append(
        Store(
            owner_id=OWNERS[0],
            name="Pop-up Stall",
            description="Location announced daily",
            business_hours="varies",
        )
    )
    return stores


async def seed(rng_seed: int = 7) -> int:
    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    stores = build_demo_stores(random.Random(rng_seed))
    async with async_transaction() as session:
        await session.execute(delete(Store))
        session.add_all(stores)
    logger.info("Seeded %d demo stores", len(stores))
    return len(stores)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed())
