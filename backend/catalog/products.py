"""
Product Service — catalog CRUD plus the product launch entry point.
"""

from datetime import datetime

import structlog

from catalog.schemas import ProductCreate, ProductResponse
from core.exceptions import EntityNotFoundError
from db.models import Product
from db.unit_of_work import UnitOfWork
from launch.collaborators import LaunchCollaborators
from launch.engine import ProductLaunchEngine
from launch.schemas import LaunchRequest, LaunchResult, UserSummary

logger = structlog.get_logger()


def _responses(products) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in products]


class ProductService:
    def __init__(self, uow: UnitOfWork, launch_collaborators: LaunchCollaborators | None = None):
        self.uow = uow
        self.launch_collaborators = launch_collaborators

    async def get_by_id(self, product_id: int) -> ProductResponse | None:
        product = await self.uow.products.get_by_id(product_id)
        return ProductResponse.model_validate(product) if product else None

    async def get_all(self) -> list[ProductResponse]:
        return _responses(await self.uow.products.get_all())

    async def get_by_user_id(self, user_id: int) -> list[ProductResponse]:
        return _responses(await self.uow.products.get_by_user_id(user_id))

    async def get_by_category(self, category: str) -> list[ProductResponse]:
        return _responses(await self.uow.products.get_by_category(category))

    async def get_available(self) -> list[ProductResponse]:
        return _responses(await self.uow.products.get_available())

    async def create(self, data: ProductCreate) -> ProductResponse:
        if not await self.uow.users.exists(data.user_id):
            raise EntityNotFoundError("User", data.user_id)

        product = Product(
            **data.model_dump(),
            is_available=True,
            created_at=datetime.utcnow(),
        )
        product = await self.uow.products.add(product)
        await self.uow.commit()

        logger.info("product.created", product_id=product.id, user_id=product.user_id)
        return ProductResponse.model_validate(product)

    async def update(self, product_id: int, data: ProductCreate) -> ProductResponse:
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)

        if product.user_id != data.user_id and not await self.uow.users.exists(data.user_id):
            raise EntityNotFoundError("User", data.user_id)

        for field, value in data.model_dump().items():
            setattr(product, field, value)
        product.touch()

        await self.uow.products.update(product)
        await self.uow.commit()
        return ProductResponse.model_validate(product)

    async def delete(self, product_id: int) -> None:
        if not await self.uow.products.exists(product_id):
            raise EntityNotFoundError("Product", product_id)
        await self.uow.products.delete(product_id)
        await self.uow.commit()
        logger.info("product.deleted", product_id=product_id)

    async def update_stock(self, product_id: int, quantity: int) -> ProductResponse:
        """Apply a signed stock delta. Raises InsufficientStockError below zero."""
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)

        product.update_stock(quantity)
        product.touch()

        await self.uow.products.update(product)
        await self.uow.commit()
        return ProductResponse.model_validate(product)

    async def exists(self, product_id: int) -> bool:
        return await self.uow.products.exists(product_id)

    async def launch_product(self, request: LaunchRequest, acting_user: UserSummary) -> LaunchResult:
        engine = ProductLaunchEngine(self.uow, collaborators=self.launch_collaborators)
        return await engine.launch(request, acting_user)
