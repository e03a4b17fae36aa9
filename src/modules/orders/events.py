"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created and its stock reserved."""

    order_number: str = ""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when order fields or items change."""

    items_replaced: bool = False


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status changes."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted and its stock released."""

    order_number: str = ""
