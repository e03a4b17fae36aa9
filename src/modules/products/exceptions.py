"""Product domain exceptions.

Raised by the Service Layer and the reservation coordinator when
catalog or inventory rules are violated.
"""

from __future__ import annotations

from modules.core.exceptions import (
    AvailabilityError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class ProductNotFound(NotFoundError):
    """The requested product does not exist."""


class ProductAlreadyExists(ConflictError):
    """The enterprise already has a product with the same name."""


class InvalidProductData(ValidationError):
    """Price or stock values are outside the allowed range."""


class InsufficientStock(AvailabilityError):
    """Not enough stock to reserve the requested quantity."""

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_name}. "
            f"Available: {available}, requested: {requested}."
        )
