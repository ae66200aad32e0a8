"""
User Service — catalog user management over the unit of work.
"""

from datetime import datetime

import structlog

from catalog.schemas import UserCreate, UserResponse
from core.exceptions import BusinessRuleViolationError, DuplicateEntityError, EntityNotFoundError
from db.models import User
from db.unit_of_work import UnitOfWork

logger = structlog.get_logger()


def _validated(user: User) -> User:
    try:
        user.validate_business_rules()
    except ValueError as exc:
        raise BusinessRuleViolationError(str(exc)) from exc
    return user


class UserService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_by_id(self, user_id: int) -> UserResponse | None:
        user = await self.uow.users.get_by_id(user_id)
        return UserResponse.model_validate(user) if user else None

    async def get_by_email(self, email: str) -> UserResponse | None:
        user = await self.uow.users.get_by_email(email)
        return UserResponse.model_validate(user) if user else None

    async def get_all(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self.uow.users.get_all()]

    async def get_active(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self.uow.users.get_active()]

    async def create(self, data: UserCreate) -> UserResponse:
        if await self.uow.users.email_exists(data.email):
            raise DuplicateEntityError("User", "email", data.email)

        user = _validated(User(**data.model_dump(), created_at=datetime.utcnow()))
        user = await self.uow.users.add(user)
        await self.uow.commit()

        logger.info("user.created", user_id=user.id)
        return UserResponse.model_validate(user)

    async def update(self, user_id: int, data: UserCreate) -> UserResponse:
        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)

        if user.email != data.email and await self.uow.users.email_exists(data.email):
            raise DuplicateEntityError("User", "email", data.email)

        for field, value in data.model_dump().items():
            setattr(user, field, value)
        user.updated_at = datetime.utcnow()
        _validated(user)

        await self.uow.users.update(user)
        await self.uow.commit()
        return UserResponse.model_validate(user)

    async def delete(self, user_id: int) -> None:
        if not await self.uow.users.exists(user_id):
            raise EntityNotFoundError("User", user_id)
        await self.uow.users.delete(user_id)
        await self.uow.commit()
        logger.info("user.deleted", user_id=user_id)

    async def activate(self, user_id: int) -> UserResponse:
        return await self._set_active(user_id, True)

    async def deactivate(self, user_id: int) -> UserResponse:
        return await self._set_active(user_id, False)

    async def _set_active(self, user_id: int, active: bool) -> UserResponse:
        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)

        if active:
            user.activate()
        else:
            user.deactivate()
        user.updated_at = datetime.utcnow()

        await self.uow.users.update(user)
        await self.uow.commit()
        return UserResponse.model_validate(user)

    async def exists(self, user_id: int) -> bool:
        return await self.uow.users.exists(user_id)

    async def email_exists(self, email: str) -> bool:
        return await self.uow.users.email_exists(email)
