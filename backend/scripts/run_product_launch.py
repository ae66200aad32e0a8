#!/usr/bin/env python3
"""Launch one product from a JSON request file and print the launch result.

Usage:
  PYTHONPATH=backend python3 backend/scripts/run_product_launch.py --request launch.json --user-id 1
  PYTHONPATH=backend python3 backend/scripts/run_product_launch.py --demo
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.config import get_settings
from db.session import Base
from db.unit_of_work import SqlAlchemyUnitOfWork
from launch.engine import ProductLaunchEngine
from launch.schemas import LaunchRequest, LaunchResult, UserSummary
from scripts.seed_catalog import seed_catalog

DEMO_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def build_demo_request(user_id: int, launch_date: datetime | None = None) -> dict[str, Any]:
    launch_date = launch_date or datetime.utcnow() + timedelta(days=14)
    return {
        "product_id": 0,
        "product_name": "Noise Cancelling Headphones",
        "description": "Over-ear headphones with adaptive noise cancelling",
        "category": "Electronics",
        "base_price": "199.00",
        "user_id": user_id,
        "launch_date": launch_date.isoformat(),
        "pricing_strategy": {
            "base_price": "189.00",
            "currency": "EUR",
            "tiered_prices": [{"price": "179.00", "min_quantity": 10, "max_quantity": 49}],
        },
        "inventory_distribution": [
            {"warehouse_id": 1, "initial_quantity": 200, "minimum_stock": 20, "maximum_stock": 500},
            {"warehouse_id": 2, "initial_quantity": 80, "minimum_stock": 10, "maximum_stock": 200},
        ],
        "marketing_campaigns": [
            {
                "name": "Launch week",
                "type": "social",
                "budget": "5000",
                "start_date": launch_date.isoformat(),
                "end_date": (launch_date + timedelta(days=7)).isoformat(),
                "channels": [{"channel": "instagram", "budget": "3000", "content": "Hear nothing."}],
            }
        ],
        "supplier_contracts": [
            {"supplier_id": 7, "contract_type": "exclusive", "unit_cost": "92.50", "lead_time_days": 21}
        ],
        "product_variants": [
            {"name": "Black", "sku": "NCH-BLK", "attributes": {"color": "black"}},
            {"name": "Silver", "sku": "NCH-SLV", "price_modifier": "10.00", "attributes": {"color": "silver"}},
        ],
        "reorder_settings": {"enable_auto_reorder": True, "reorder_point": 30, "reorder_quantity": 100},
    }


async def run_launch(
    request: LaunchRequest,
    user_id: int,
    database_url: str,
    seed: bool = False,
) -> LaunchResult:
    engine_kwargs: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        engine_kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    db_engine = create_async_engine(database_url, **engine_kwargs)
    try:
        if seed:
            async with db_engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        SessionLocal = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
        async with SessionLocal() as db:
            if seed:
                await seed_catalog(db)
            uow = SqlAlchemyUnitOfWork(db)
            user = await uow.users.get_by_id(user_id)
            if user is None:
                raise ValueError(f"User {user_id} not found")
            acting_user = UserSummary.model_validate(user)
            return await ProductLaunchEngine(uow).launch(request, acting_user)
    finally:
        await db_engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one product launch and print the result as JSON.")
    parser.add_argument("--request", type=Path, default=None, help="Path to a launch request JSON file")
    parser.add_argument("--user-id", type=int, default=1, help="Acting user id")
    parser.add_argument("--database-url", type=str, default=None)
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use an in-memory database seeded with demo data and a built-in request",
    )
    args = parser.parse_args(argv)

    if args.demo:
        database_url = args.database_url or DEMO_DATABASE_URL
        payload = build_demo_request(args.user_id)
    else:
        if args.request is None:
            parser.error("--request is required unless --demo is given")
        database_url = args.database_url or get_settings().database_url
        payload = json.loads(args.request.read_text(encoding="utf-8"))

    request = LaunchRequest.model_validate(payload)
    result = asyncio.run(run_launch(request, args.user_id, database_url, seed=args.demo))
    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
