"""
CatalogOps Database Models

Tables:
  1. users     - People who own products and act on the catalog
  2. products  - Product catalog (lifecycle status, stock, price)

Domain rules live on the models so services and the launch workflow
share one definition of a valid user or product.
"""

import re
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from core.exceptions import InsufficientStockError, InvalidPriceError
from db.session import Base

USER_ROLES = ("user", "admin", "moderator")
PRODUCT_STATUSES = ("draft", "active", "inactive", "discontinued")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# ─── 1. Users ───────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(256), nullable=False, unique=True)
    phone_number = Column(String(20))
    role = Column(String(20), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    date_of_birth = Column(Date)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime)
    created_by = Column(String(100))
    updated_by = Column(String(100))

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin', 'moderator')", name="ck_user_role"),
    )

    products = relationship("Product", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age(self, today: date | None = None) -> int:
        if self.date_of_birth is None:
            return 0
        today = today or date.today()
        years = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def is_admin(self) -> bool:
        return self.role == "admin"

    def is_moderator(self) -> bool:
        return self.role == "moderator"

    def has_admin_privileges(self) -> bool:
        return self.role in ("admin", "moderator")

    def promote_to_admin(self) -> None:
        self.role = "admin"

    def promote_to_moderator(self) -> None:
        self.role = "moderator"

    def demote_to_user(self) -> None:
        self.role = "user"

    def is_valid_email(self) -> bool:
        return bool(self.email) and _EMAIL_RE.match(self.email) is not None

    def has_valid_name(self) -> bool:
        return (
            bool(self.first_name and self.first_name.strip())
            and bool(self.last_name and self.last_name.strip())
            and len(self.first_name) <= 100
            and len(self.last_name) <= 100
        )

    def validate_business_rules(self) -> None:
        if not self.has_valid_name():
            raise ValueError("First name and last name are required and must not exceed 100 characters")
        if not self.is_valid_email():
            raise ValueError("A valid email address is required")
        if len(self.email) > 256:
            raise ValueError("Email cannot exceed 256 characters")
        if self.phone_number and len(self.phone_number) > 20:
            raise ValueError("Phone number cannot exceed 20 characters")


# ─── 2. Products ────────────────────────────────────────────────────────────


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(String(1000))
    price = Column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    stock_quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(100))
    status = Column(String(20), nullable=False, default="draft")
    is_available = Column(Boolean, nullable=False, default=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime)
    created_by = Column(String(100))
    updated_by = Column(String(100))

    __table_args__ = (
        Index("ix_products_user", "user_id"),
        Index("ix_products_category", "category"),
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint(
            "status IN ('draft', 'active', 'inactive', 'discontinued')",
            name="ck_product_status",
        ),
    )

    user = relationship("User", back_populates="products")

    # Lifecycle

    @property
    def in_stock(self) -> bool:
        return self.is_in_stock()

    def is_in_stock(self) -> bool:
        return (self.stock_quantity or 0) > 0 and self.status == "active"

    def is_published(self) -> bool:
        return self.status == "active"

    def is_draft(self) -> bool:
        return self.status == "draft"

    def is_discontinued(self) -> bool:
        return self.status == "discontinued"

    def update_stock(self, quantity: int) -> None:
        """Apply a signed stock delta; stock can never go below zero."""
        current = self.stock_quantity or 0
        if current + quantity < 0:
            raise InsufficientStockError()
        self.stock_quantity = current + quantity

    def set_price(self, new_price: Decimal) -> None:
        if new_price <= 0:
            raise InvalidPriceError()
        self.price = new_price

    def publish(self) -> None:
        if self.status == "draft":
            self.status = "active"
            self.is_available = True

    def deactivate(self) -> None:
        if self.status == "active":
            self.status = "inactive"
            self.is_available = False

    def reactivate(self) -> None:
        if self.status == "inactive":
            self.status = "active"
            self.is_available = True

    def discontinue(self) -> None:
        self.status = "discontinued"
        self.is_available = False

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    # Validation

    def has_valid_name(self) -> bool:
        return bool(self.name and self.name.strip()) and len(self.name) <= 200

    def has_valid_price(self) -> bool:
        return self.price is not None and self.price > 0

    def has_valid_stock(self) -> bool:
        return (self.stock_quantity or 0) >= 0

    def has_valid_description(self) -> bool:
        return self.description is None or len(self.description) <= 1000

    def has_valid_category(self) -> bool:
        return self.category is None or len(self.category) <= 100

    def validate_business_rules(self) -> None:
        if not self.has_valid_name():
            raise ValueError("Product name is required and cannot exceed 200 characters")
        if not self.has_valid_price():
            raise ValueError("Product price must be greater than 0")
        if not self.has_valid_stock():
            raise ValueError("Stock quantity cannot be negative")
        if not self.has_valid_description():
            raise ValueError("Description cannot exceed 1000 characters")
        if not self.has_valid_category():
            raise ValueError("Category cannot exceed 100 characters")
