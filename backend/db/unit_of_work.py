"""
Unit of Work — one transactional boundary over the user and product repositories.

Services and the launch workflow depend on the ``UnitOfWork`` protocol only;
``SqlAlchemyUnitOfWork`` is the relational implementation backed by a single
``AsyncSession``.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from db.repositories import ProductRepository, UserRepository


class UnitOfWork(Protocol):
    """Atomic transactional boundary exposing the repositories."""

    users: UserRepository
    products: ProductRepository

    async def begin(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def save(self) -> None: ...


class SqlAlchemyUnitOfWork:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.products = ProductRepository(session)

    async def begin(self) -> None:
        # A read before begin() autobegins the session transaction; reuse it.
        if not self.session.in_transaction():
            await self.session.begin()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def save(self) -> None:
        """Flush pending writes without ending the transaction."""
        await self.session.flush()

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback()
