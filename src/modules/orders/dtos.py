"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between callers and the Service layer.
DTOs are immutable (``frozen=True``) and only coerce types; every
business rule lives in ``modules.orders.validators`` so violations
surface as domain errors.

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``UpdateOrderDTO``: partial update, optionally replacing all items.
- ``OrderItemOutputDTO``: output for a single line item.
- ``OrderOutputDTO``: output with items and referenced entity names.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item.

    ``product_name`` and ``unit_price`` are the caller's view of the
    catalog; both must match the current product record.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    @field_validator("product_name")
    @classmethod
    def strip_product_name(cls, v: str) -> str:
        return v.strip()


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``total_amount`` is optional: when omitted the service computes it
    as the sum of the item subtotals.
    """

    model_config = ConfigDict(frozen=True)

    order_number: str
    order_date: date
    customer_id: UUID
    enterprise_id: UUID
    items: List[CreateOrderItemDTO]
    total_amount: Optional[Decimal] = None
    notes: Optional[str] = ""

    @field_validator("order_number")
    @classmethod
    def strip_order_number(cls, v: str) -> str:
        return v.strip()


class UpdateOrderDTO(BaseModel):
    """Immutable DTO for order update requests.

    All fields are optional; only supplied fields will be updated.
    Supplying ``items`` replaces the whole item set.
    """

    model_config = ConfigDict(frozen=True)

    order_number: Optional[str] = None
    order_date: Optional[date] = None
    customer_id: Optional[UUID] = None
    enterprise_id: Optional[UUID] = None
    total_amount: Optional[Decimal] = None
    notes: Optional[str] = None
    items: Optional[List[CreateOrderItemDTO]] = None

    @field_validator("order_number")
    @classmethod
    def strip_order_number(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderItemOutputDTO(BaseModel):
    """Immutable DTO for order item responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderOutputDTO(BaseModel):
    """Immutable DTO for order responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    order_number: str
    order_date: date
    status: str
    customer_id: UUID
    customer_name: str
    enterprise_id: UUID
    enterprise_name: str
    total_amount: Decimal
    notes: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOutputDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Build an output DTO from an Order model instance.

        Assumes ``customer`` / ``enterprise`` are select-related and
        ``items`` prefetched.
        """
        items = [
            OrderItemOutputDTO(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in order.items.all()
        ]
        return cls(
            id=order.id,
            order_number=order.order_number,
            order_date=order.order_date,
            status=order.status,
            customer_id=order.customer_id,
            customer_name=order.customer.name,
            enterprise_id=order.enterprise_id,
            enterprise_name=order.enterprise.trade_name,
            total_amount=order.total_amount,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=items,
        )
