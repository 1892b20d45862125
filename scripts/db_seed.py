"""Seed the database with a demo user and a small product catalog.

Idempotent: tables are created if missing, the demo user is registered only
once and products are inserted only when no product with the same name exists.

Usage:
    python scripts/db_seed.py

Connection settings come from DATABASE_URL or DB_* (see .env.example).
"""
import asyncio
import sys

import structlog
from sqlalchemy import select

from storefront.auth import AuthService
from storefront.catalog import ProductService
from storefront.config import Settings
from storefront.database import build_engine, build_session_maker, ensure_database_exists, init_models
from storefront.errors import Conflict
from storefront.logging_config import configure_logging
from storefront.models import Product
from storefront.repositories import ProductRepository, UserRepository

logger = structlog.get_logger("db_seed")

DEMO_USER = {"email": "demo@example.com", "password": "password123", "name": "Demo User"}

FIXED_PRODUCTS = [
    {"name": "Air filter", "price": "19.90", "stock": 40,
     "description": "Replacement engine air filter for 1.4/1.8/2.0 petrol engines."},
    {"name": "Front brake pads", "price": "54.99", "stock": 25,
     "description": "Front axle brake pad set with low-dust compound."},
    {"name": "Spark plug (platinum)", "price": "12.50", "stock": 120,
     "description": "Platinum-tipped spark plug with a long service interval."},
    {"name": "Timing belt kit", "price": "129.00", "stock": 8,
     "description": "Timing belt with tensioner and idler pulleys."},
    {"name": "Oil filter", "price": "9.99", "stock": 200,
     "description": "Spin-on oil filter for regular service intervals."},
]


async def seed(settings: Settings) -> None:
    engine = build_engine(settings)
    session_maker = build_session_maker(engine)
    try:
        await init_models(engine)

        async with session_maker() as session:
            auth = AuthService(UserRepository(session), settings)
            try:
                user = await auth.register(**DEMO_USER)
                logger.info("Seeded demo user", email=user.email)
            except Conflict:
                logger.info("Demo user already present", email=DEMO_USER["email"])

            catalog = ProductService(ProductRepository(session))
            created = 0
            for item in FIXED_PRODUCTS:
                result = await session.execute(select(Product.id).where(Product.name == item["name"]))
                if result.first() is not None:
                    continue
                await catalog.create(**item)
                created += 1
            logger.info("Seeded products", created=created, total=len(FIXED_PRODUCTS))
    finally:
        await engine.dispose()


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)
    if not ensure_database_exists(settings.sync_database_url):
        logger.error("Database is not reachable", url=settings.sync_database_url)
        sys.exit(1)
    asyncio.run(seed(settings))
    logger.info("DB seed complete")


if __name__ == "__main__":
    main()
