"""
Tests for mapping domain exceptions onto HTTP error responses.
"""

import json

import pytest

from api.errors import error_response, resolve_error
from core.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    DuplicateEntityError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidPriceError,
)


class TestResolveError:
    @pytest.mark.parametrize(
        "exc,status_code",
        [
            (EntityNotFoundError("Product", 1), 404),
            (DuplicateEntityError("User", "email", "a@b.c"), 409),
            (BusinessRuleViolationError("bad"), 400),
            (InsufficientStockError(), 400),
            (InvalidPriceError(), 400),
            (DomainError("rule"), 400),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_status_codes(self, exc, status_code):
        assert resolve_error(exc)[0] == status_code

    def test_unexpected_error_gets_generic_message(self):
        _, message = resolve_error(KeyError("internal"))
        assert message == "An error occurred while processing your request."


class TestErrorResponse:
    def test_envelope(self):
        response = error_response(EntityNotFoundError("User", 9))

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body == {
            "error": {
                "message": "The requested resource was not found.",
                "details": "User with ID '9' was not found.",
            }
        }

    def test_exception_messages(self):
        assert str(DuplicateEntityError("Product", "name", "Widget")) == "Product with name 'Widget' already exists."
        assert str(InsufficientStockError()) == "Insufficient stock available"
        assert str(InvalidPriceError()) == "Price must be greater than zero"
