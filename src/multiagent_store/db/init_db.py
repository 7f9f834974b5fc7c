"""
multiagent_store.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the demo outdoor-gear catalog when the product table is empty.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from multiagent_store.db.base import Base
from multiagent_store.db.models import Product
from multiagent_store.observability.logging import get_logger

log = get_logger(__name__)

DEMO_CATALOG: tuple[tuple[str, str, str, str], ...] = (
    (
        "Solar Powered Flashlight",
        "A fantastic product for outdoor enthusiasts, powered by the sun.",
        "19.99",
        "product1.png",
    ),
    (
        "Hiking Poles",
        "Ideal for camping and hiking trips, lightweight aluminium with cork grips.",
        "24.99",
        "product2.png",
    ),
    (
        "Outdoor Rain Jacket",
        "This product will keep you warm and dry in all weathers.",
        "49.99",
        "product3.png",
    ),
    (
        "Survival Kit",
        "A must-have for any outdoor adventurer: fire starter, whistle and first aid.",
        "99.99",
        "product4.png",
    ),
    (
        "Outdoor Backpack",
        "This backpack is perfect for carrying all your outdoor essentials.",
        "39.99",
        "product5.png",
    ),
    (
        "Camping Cookware",
        "This cookware set is ideal for cooking outdoors over a camp stove.",
        "29.99",
        "product6.png",
    ),
    (
        "Camping Stove",
        "This stove is perfect for cooking outdoors on camping and hiking trips.",
        "49.99",
        "product7.png",
    ),
    (
        "Camping Lantern",
        "This lantern is perfect for lighting up your campsite at night.",
        "19.99",
        "product8.png",
    ),
    (
        "Camping Tent",
        "This two-person tent is perfect for camping trips in any weather.",
        "99.99",
        "product9.png",
    ),
    (
        "Waterproof Hiking Boots",
        "Grippy outsole and waterproof membrane for wet trails.",
        "89.99",
        "product10.png",
    ),
    (
        "Paint Roller Kit",
        "Roller frame, tray and two covers for interior walls.",
        "14.99",
        "product11.png",
    ),
    (
        "Exterior Wood Stain",
        "Weather-resistant stain for decks, fences and outdoor furniture.",
        "34.99",
        "product12.png",
    ),
)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_catalog(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """
    Insert the demo catalog if the product table is empty.

    Returns the number of products inserted (0 when the table already had rows).
    """

    async with session_factory() as session:
        existing = (await session.execute(select(func.count(Product.id)))).scalar_one()
        if existing:
            return 0
        session.add_all(
            Product(name=name, description=description, price=Decimal(price), image_url=image)
            for name, description, price, image in DEMO_CATALOG
        )
        await session.commit()

    log.info("catalog_seeded", products=len(DEMO_CATALOG))
    return len(DEMO_CATALOG)
