"""
Tests for the domain rules carried by the User and Product models.
"""

from datetime import date
from decimal import Decimal

import pytest

from core.exceptions import InsufficientStockError, InvalidPriceError
from db.models import Product, User


def _user(**overrides) -> User:
    fields = {"first_name": "John", "last_name": "Doe", "email": "john.doe@example.com", "role": "user"}
    fields.update(overrides)
    return User(**fields)


def _product(**overrides) -> Product:
    fields = {"name": "Widget", "price": Decimal("10.00"), "stock_quantity": 5, "status": "draft"}
    fields.update(overrides)
    return Product(**fields)


class TestUser:
    def test_full_name(self):
        assert _user().full_name == "John Doe"

    def test_age_before_and_after_birthday(self):
        user = _user(date_of_birth=date(1990, 6, 15))
        assert user.age(today=date(2026, 6, 14)) == 35
        assert user.age(today=date(2026, 6, 15)) == 36

    def test_age_without_birth_date(self):
        assert _user().age() == 0

    def test_role_changes(self):
        user = _user()
        assert not user.has_admin_privileges()

        user.promote_to_moderator()
        assert user.is_moderator()
        assert user.has_admin_privileges()

        user.promote_to_admin()
        assert user.is_admin()

        user.demote_to_user()
        assert user.role == "user"

    def test_activation(self):
        user = _user(is_active=True)
        user.deactivate()
        assert user.is_active is False
        user.activate()
        assert user.is_active is True

    @pytest.mark.parametrize("email", ["", "plain", "a@b", "two words@example.com"])
    def test_invalid_email(self, email):
        assert not _user(email=email).is_valid_email()

    def test_validate_business_rules(self):
        _user().validate_business_rules()

        with pytest.raises(ValueError):
            _user(first_name="  ").validate_business_rules()
        with pytest.raises(ValueError):
            _user(phone_number="1" * 21).validate_business_rules()


class TestProduct:
    def test_publish_lifecycle(self):
        product = _product()
        assert product.is_draft()
        assert not product.in_stock

        product.publish()
        assert product.is_published()
        assert product.in_stock

        product.deactivate()
        assert product.status == "inactive"
        assert product.is_available is False

        product.reactivate()
        assert product.status == "active"

        product.discontinue()
        assert product.is_discontinued()
        assert not product.in_stock

    def test_publish_only_from_draft(self):
        product = _product(status="discontinued")
        product.publish()
        assert product.status == "discontinued"

    def test_update_stock(self):
        product = _product()
        product.update_stock(-5)
        assert product.stock_quantity == 0

        with pytest.raises(InsufficientStockError):
            product.update_stock(-1)
        assert product.stock_quantity == 0

    def test_set_price(self):
        product = _product()
        product.set_price(Decimal("12.00"))
        assert product.price == Decimal("12.00")

        with pytest.raises(InvalidPriceError):
            product.set_price(Decimal("0"))

    def test_touch_sets_updated_at(self):
        product = _product()
        assert product.updated_at is None
        product.touch()
        assert product.updated_at is not None

    def test_validate_business_rules(self):
        _product().validate_business_rules()

        with pytest.raises(ValueError, match="price"):
            _product(price=Decimal("0")).validate_business_rules()
        with pytest.raises(ValueError, match="Description"):
            _product(description="x" * 1001).validate_business_rules()
