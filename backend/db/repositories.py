"""
Repositories — async SQLAlchemy data access for users and products.

Repositories never commit. Writes are staged on the shared session and made
durable by the unit of work that owns it (see db/unit_of_work.py).
"""

from collections.abc import Sequence

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Product, User


class ProductRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, product_id: int) -> Product | None:
        return await self._session.get(Product, product_id)

    async def get_all(self) -> Sequence[Product]:
        result = await self._session.execute(select(Product).order_by(Product.id))
        return result.scalars().all()

    async def get_by_user_id(self, user_id: int) -> Sequence[Product]:
        result = await self._session.execute(
            select(Product).where(Product.user_id == user_id).order_by(Product.id)
        )
        return result.scalars().all()

    async def get_by_category(self, category: str) -> Sequence[Product]:
        result = await self._session.execute(
            select(Product).where(Product.category == category).order_by(Product.id)
        )
        return result.scalars().all()

    async def get_available(self) -> Sequence[Product]:
        result = await self._session.execute(
            select(Product)
            .where(Product.is_available.is_(True), Product.stock_quantity > 0)
            .order_by(Product.id)
        )
        return result.scalars().all()

    async def add(self, product: Product) -> Product:
        """Stage a new product and flush so its generated id is available."""
        self._session.add(product)
        await self._session.flush()
        return product

    async def update(self, product: Product) -> None:
        self._session.add(product)

    async def delete(self, product_id: int) -> None:
        product = await self._session.get(Product, product_id)
        if product is not None:
            await self._session.delete(product)

    async def exists(self, product_id: int) -> bool:
        result = await self._session.execute(select(exists().where(Product.id == product_id)))
        return bool(result.scalar())


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_all(self) -> Sequence[User]:
        result = await self._session.execute(select(User).order_by(User.id))
        return result.scalars().all()

    async def get_active(self) -> Sequence[User]:
        result = await self._session.execute(
            select(User).where(User.is_active.is_(True)).order_by(User.id)
        )
        return result.scalars().all()

    async def add(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        return user

    async def update(self, user: User) -> None:
        self._session.add(user)

    async def delete(self, user_id: int) -> None:
        user = await self._session.get(User, user_id)
        if user is not None:
            # ORM delete so the products cascade runs on SQLite too
            await self._session.delete(user)

    async def exists(self, user_id: int) -> bool:
        result = await self._session.execute(select(exists().where(User.id == user_id)))
        return bool(result.scalar())

    async def email_exists(self, email: str) -> bool:
        result = await self._session.execute(select(exists().where(User.email == email)))
        return bool(result.scalar())
