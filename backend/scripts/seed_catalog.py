"""
Seed Catalog — Creates the demo users and products for development.

Run: python scripts/seed_catalog.py
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import get_settings
from db.models import Product, User
from db.session import Base

settings = get_settings()
logger = structlog.get_logger()

DEMO_USERS = [
    {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "phone_number": "+1234567890",
        "date_of_birth": date(1990, 1, 15),
        "role": "admin",
    },
    {
        "first_name": "Jane",
        "last_name": "Smith",
        "email": "jane.smith@example.com",
        "phone_number": "+1987654321",
        "date_of_birth": date(1985, 6, 20),
    },
]

# (name, description, price, stock, category, owner index)
DEMO_PRODUCTS = [
    ("Laptop Computer", "High-performance laptop for professional use", "1299.99", 50, "Electronics", 0),
    ("Wireless Mouse", "Ergonomic wireless mouse with long battery life", "29.99", 100, "Electronics", 0),
    ("Office Chair", "Comfortable office chair with lumbar support", "249.99", 25, "Furniture", 1),
]


async def seed_catalog(db: AsyncSession) -> dict[str, list]:
    """Insert demo users and products into an empty catalog."""
    now = datetime.utcnow()
    users = [User(**data, created_at=now, created_by="System") for data in DEMO_USERS]
    db.add_all(users)
    await db.flush()

    products = [
        Product(
            name=name,
            description=description,
            price=Decimal(price),
            stock_quantity=stock,
            category=category,
            status="active",
            is_available=True,
            user_id=users[owner].id,
            created_at=now,
            created_by="System",
        )
        for name, description, price, stock, category, owner in DEMO_PRODUCTS
    ]
    db.add_all(products)
    await db.commit()

    logger.info("seed.catalog_created", users=len(users), products=len(products))
    return {"users": users, "products": products}


async def main() -> None:
    engine = create_async_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with SessionLocal() as db:
        await seed_catalog(db)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
