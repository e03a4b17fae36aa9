"""Order domain exceptions.

Raised by the validation pipeline, the state machine and the Service
Layer when business rules are violated.  Each one subclasses a kind from
``modules.core.exceptions`` so callers can map it to a response category.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError, ValidationError


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""


class DuplicateOrderNumber(ConflictError):
    """Another order already uses this order number."""


class OrderLocked(ConflictError):
    """The order is in a terminal status and can no longer change."""


class OrderDeletionNotAllowed(ConflictError):
    """Completed orders cannot be deleted."""


class InvalidStatusTransition(ValidationError):
    """The requested status transition is not in the transition table."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid status transition from {current} to {target}.")


class InvalidOrderStatus(ValidationError):
    """The supplied value is not a known order status."""


class InvalidOrderNumber(ValidationError):
    """The order number is empty, too long or has forbidden characters."""


class InvalidOrderDate(ValidationError):
    """The order date lies in the future."""


class InvalidOrderItems(ValidationError):
    """The item list is empty, has duplicates or breaks a quantity cap."""


class ProductNotInEnterprise(ValidationError):
    """An item references a product owned by another enterprise."""


class ItemSnapshotMismatch(ValidationError):
    """An item's unit price or product name differs from the catalog."""


class OrderTotalMismatch(ValidationError):
    """A subtotal or the order total does not add up."""


class MinimumOrderValueNotReached(ValidationError):
    """The order total is below the minimum order value."""
