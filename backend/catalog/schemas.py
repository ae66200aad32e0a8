"""
Catalog Schemas — request and response bodies for users and products.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from launch.schemas import ProductSummary, UserSummary

ProductStatus = Literal["draft", "active", "inactive", "discontinued"]
UserRole = Literal["user", "admin", "moderator"]


# ─── Users ──────────────────────────────────────────────────────────────────


class UserCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=256)
    phone_number: str | None = Field(None, max_length=20)
    role: UserRole = "user"
    is_active: bool = True
    date_of_birth: date | None = None


class UserResponse(UserSummary):
    phone_number: str | None
    date_of_birth: date | None
    created_at: datetime
    updated_at: datetime | None


# ─── Products ───────────────────────────────────────────────────────────────


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    price: Decimal = Field(..., gt=0)
    stock_quantity: int = Field(0, ge=0)
    category: str | None = Field(None, max_length=100)
    status: ProductStatus = "draft"
    user_id: int


class StockAdjustment(BaseModel):
    quantity: int


ProductResponse = ProductSummary
