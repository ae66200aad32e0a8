"""
Test Configuration — Fixtures for async DB, unit of work, test client, and seed data.

Every test gets its own SQLite database file so commits and rollbacks
made by the code under test are real and observable.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from api.deps import get_current_user, get_db, get_launch_collaborators
from api.main import app
from db.models import Product, User
from db.session import Base
from db.unit_of_work import SqlAlchemyUnitOfWork
from launch.collaborators import LaunchCollaborators, LaunchNotifier
from launch.schemas import UserSummary


class RecordingNotifier(LaunchNotifier):
    """Captures launch notifications instead of calling a webhook."""

    def __init__(self):
        self.sent: list[tuple] = []

    async def notify(self, product, campaigns) -> None:
        self.sent.append((product, campaigns))


@pytest.fixture
async def test_engine(tmp_path):
    """Create a fresh file-backed database and build all tables.

    A file (not :memory:) gives each session its own connection, so a second
    session only sees what the first one committed.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def uow(test_db):
    return SqlAlchemyUnitOfWork(test_db)


@pytest.fixture
async def seeded_db(session_factory):
    """Seed two users and one product named "Widget" (id=1)."""
    async with session_factory() as db:
        owner = User(
            first_name="John",
            last_name="Doe",
            email="john.doe@example.com",
            role="admin",
            is_active=True,
            created_at=datetime.utcnow(),
        )
        other = User(
            first_name="Jane",
            last_name="Smith",
            email="jane.smith@example.com",
            role="user",
            is_active=True,
            created_at=datetime.utcnow(),
        )
        db.add_all([owner, other])
        await db.flush()

        widget = Product(
            name="Widget",
            description="The original widget",
            price=Decimal("10.00"),
            stock_quantity=5,
            category="Gadgets",
            status="active",
            is_available=True,
            user_id=owner.id,
            created_at=datetime.utcnow(),
        )
        db.add(widget)
        await db.commit()

        return {"owner": owner, "other": other, "widget": widget}


@pytest.fixture
def acting_user(seeded_db):
    return UserSummary.model_validate(seeded_db["owner"])


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def collaborators(notifier):
    return LaunchCollaborators(notifier=notifier)


@pytest.fixture
async def client(test_db, seeded_db, acting_user, collaborators):
    """Create an async test client with dependency overrides."""

    async def override_get_db():
        yield test_db

    def override_get_current_user():
        return acting_user

    def override_get_launch_collaborators():
        return collaborators

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_launch_collaborators] = override_get_launch_collaborators

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def committed_products(session_factory):
    """Read products through a fresh session so only committed rows are visible."""

    async def _fetch() -> list[Product]:
        async with session_factory() as db:
            result = await db.execute(select(Product).order_by(Product.id))
            return list(result.scalars().all())

    return _fetch
