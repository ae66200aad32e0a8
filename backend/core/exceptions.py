"""
Domain and application exceptions.

The API layer maps these to HTTP status codes (see api/errors.py).
"""


class DomainError(Exception):
    """Base class for every rule violation raised by the domain."""


class EntityNotFoundError(DomainError):
    def __init__(self, entity_name: str, entity_id: object):
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f"{entity_name} with ID '{entity_id}' was not found.")


class DuplicateEntityError(DomainError):
    def __init__(self, entity_name: str, field: str, value: object):
        self.entity_name = entity_name
        self.field = field
        self.value = value
        super().__init__(f"{entity_name} with {field} '{value}' already exists.")


class BusinessRuleViolationError(DomainError):
    pass


class InsufficientStockError(DomainError):
    def __init__(self, message: str = "Insufficient stock available"):
        super().__init__(message)


class InvalidPriceError(DomainError):
    def __init__(self, message: str = "Price must be greater than zero"):
        super().__init__(message)


class DuplicateProductNameError(DuplicateEntityError):
    """A launch tried to reuse the name of a different product."""

    def __init__(self, name: str):
        super().__init__("Product", "name", name)
