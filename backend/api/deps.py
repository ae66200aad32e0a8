"""
CatalogOps API Dependencies

Dependency injection for DB sessions, the unit of work, services and the
acting user.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.products import ProductService
from catalog.users import UserService
from core.config import get_settings
from db.session import AsyncSessionLocal
from db.unit_of_work import SqlAlchemyUnitOfWork
from launch.collaborators import LaunchCollaborators
from launch.schemas import UserSummary

settings = get_settings()
security = HTTPBearer(auto_error=not settings.debug)

# Dev user id must match the first seeded user
DEV_USER_ID = 1


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_uow(db: AsyncSession = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db)


def get_launch_collaborators() -> LaunchCollaborators:
    return LaunchCollaborators()


async def get_user_service(uow: SqlAlchemyUnitOfWork = Depends(get_uow)) -> UserService:
    return UserService(uow)


async def get_product_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    collaborators: LaunchCollaborators = Depends(get_launch_collaborators),
) -> ProductService:
    return ProductService(uow, launch_collaborators=collaborators)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
) -> UserSummary:
    """Resolve the acting user from the bearer token. Debug mode acts as the dev user."""
    if settings.debug:
        user_id = DEV_USER_ID
    else:
        if credentials is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
            )

        from core.security import decode_access_token

        payload = decode_access_token(credentials.credentials)
        if payload is None or not str(payload.get("sub", "")).isdigit():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )
        user_id = int(payload["sub"])

    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )
    return UserSummary.model_validate(user)
