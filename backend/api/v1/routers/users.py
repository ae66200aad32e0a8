"""
Users Router — CRUD and activation for catalog users.
"""

from fastapi import APIRouter, Depends, Query

from api.deps import get_user_service
from catalog.schemas import UserCreate, UserResponse
from catalog.users import UserService
from core.exceptions import EntityNotFoundError

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/", response_model=list[UserResponse])
async def list_users(
    active: bool = Query(False, description="Only return active users"),
    service: UserService = Depends(get_user_service),
):
    """List users, optionally only the active ones."""
    if active:
        return await service.get_active()
    return await service.get_all()


@router.get("/by-email", response_model=UserResponse)
async def get_user_by_email(
    email: str = Query(..., min_length=3),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_by_email(email)
    if user is None:
        raise EntityNotFoundError("User", email)
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await service.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundError("User", user_id)
    return user


@router.post("/", response_model=UserResponse, status_code=201)
async def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """Create a user. Email addresses are unique."""
    return await service.create(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user: UserCreate,
    service: UserService = Depends(get_user_service),
):
    return await service.update(user_id, user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    """Delete a user and, by cascade, their products."""
    await service.delete(user_id)


@router.post("/{user_id}/activate", response_model=UserResponse)
async def activate_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    return await service.activate(user_id)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    return await service.deactivate(user_id)
