"""Order validation pipeline.

Pure, stateless checks run by ``OrderService`` before any write.  Each
function raises the most specific domain error on the first violation
it finds and returns ``None`` otherwise.  Lookups happen in the service;
the functions here only receive the records they compare against.

Checks fall into five groups:

1. Shape: order number, order date, item list.
2. Referential: products exist and belong to the order's enterprise.
3. Consistency: snapshots, subtotals and total agree.
4. Business: minimum order value.
5. Availability: enough stock for every item (re-checked atomically by
   the reservation coordinator).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Protocol, Sequence
from uuid import UUID

from django.utils import timezone

from modules.orders.constants import (
    AMOUNT_TOLERANCE,
    CENTS,
    MAX_ITEM_QUANTITY,
    MAX_ORDER_QUANTITY,
    MIN_ITEM_QUANTITY,
    MIN_ORDER_VALUE,
    ORDER_NUMBER_MAX_LENGTH,
    ORDER_NUMBER_PATTERN,
    PRODUCT_NAME_MAX_LENGTH,
)
from modules.orders.exceptions import (
    InvalidOrderDate,
    InvalidOrderItems,
    InvalidOrderNumber,
    ItemSnapshotMismatch,
    MinimumOrderValueNotReached,
    OrderTotalMismatch,
    ProductNotInEnterprise,
)
from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product


class OrderLine(Protocol):
    """Shape shared by item DTOs and persisted ``OrderItem`` rows."""

    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------


def validate_order_number(order_number: Optional[str]) -> None:
    if not order_number or not order_number.strip():
        raise InvalidOrderNumber("Order number is required.")
    if len(order_number) > ORDER_NUMBER_MAX_LENGTH:
        raise InvalidOrderNumber(
            f"Order number cannot be longer than {ORDER_NUMBER_MAX_LENGTH} characters."
        )
    if not ORDER_NUMBER_PATTERN.fullmatch(order_number):
        raise InvalidOrderNumber(
            "Order number may only contain letters, digits and hyphens."
        )


def validate_order_date(order_date: date, today: Optional[date] = None) -> None:
    today = today or timezone.localdate()
    if order_date > today:
        raise InvalidOrderDate(
            f"Order date cannot be in the future ({order_date} > {today})."
        )


def validate_items(items: Sequence[OrderLine]) -> None:
    """Check the item list as a whole, then every item on its own.

    Raises:
        InvalidOrderItems: empty list, duplicate product, quantity or
            price out of range, missing product name.
    """
    if not items:
        raise InvalidOrderItems("An order must have at least one item.")

    product_ids = [item.product_id for item in items]
    if len(product_ids) != len(set(product_ids)):
        raise InvalidOrderItems("An order cannot contain the same product twice.")

    for position, item in enumerate(items, start=1):
        _validate_item(item, position)

    total_quantity = sum(item.quantity for item in items)
    if total_quantity > MAX_ORDER_QUANTITY:
        raise InvalidOrderItems(
            f"Total item quantity cannot exceed {MAX_ORDER_QUANTITY}. "
            f"Current total: {total_quantity}."
        )


def _validate_item(item: OrderLine, position: int) -> None:
    prefix = f"Item {position}"
    if item.quantity < MIN_ITEM_QUANTITY:
        raise InvalidOrderItems(f"{prefix}: quantity must be at least {MIN_ITEM_QUANTITY}.")
    if item.quantity > MAX_ITEM_QUANTITY:
        raise InvalidOrderItems(f"{prefix}: quantity cannot exceed {MAX_ITEM_QUANTITY}.")
    if item.unit_price < 0:
        raise InvalidOrderItems(f"{prefix}: unit price cannot be negative.")
    if item.subtotal < 0:
        raise InvalidOrderItems(f"{prefix}: subtotal cannot be negative.")
    if not _is_cents(item.unit_price):
        raise InvalidOrderItems(f"{prefix}: unit price must have at most 2 decimal places.")
    if not _is_cents(item.subtotal):
        raise InvalidOrderItems(f"{prefix}: subtotal must have at most 2 decimal places.")
    if not item.product_name:
        raise InvalidOrderItems(f"{prefix}: product name is required.")
    if len(item.product_name) > PRODUCT_NAME_MAX_LENGTH:
        raise InvalidOrderItems(
            f"{prefix}: product name cannot be longer than "
            f"{PRODUCT_NAME_MAX_LENGTH} characters."
        )


def _is_cents(amount: Decimal) -> bool:
    return amount == amount.quantize(CENTS)


# ---------------------------------------------------------------------------
# Referential
# ---------------------------------------------------------------------------


def ensure_products_found(
    items: Iterable[OrderLine], products: Mapping[UUID, Product]
) -> None:
    for item in items:
        if item.product_id not in products:
            raise ProductNotFound(f"Product {item.product_id} not found.")


def validate_enterprise_ownership(
    products: Iterable[Product], enterprise_id: UUID
) -> None:
    for product in products:
        if product.enterprise_id != enterprise_id:
            raise ProductNotInEnterprise(
                f"Product {product.name} does not belong to enterprise {enterprise_id}."
            )


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------


def validate_item_snapshots(
    items: Iterable[OrderLine], products: Mapping[UUID, Product]
) -> None:
    """Unit price and product name must match the current catalog record."""
    for item in items:
        product = products[item.product_id]
        if abs(product.price - item.unit_price) > AMOUNT_TOLERANCE:
            raise ItemSnapshotMismatch(
                f"Incorrect unit price for product {product.name}. "
                f"Current price: {product.price:.2f}, informed: {item.unit_price:.2f}."
            )
        if product.name != item.product_name:
            raise ItemSnapshotMismatch(
                f"Incorrect product name. Expected: {product.name}, "
                f"informed: {item.product_name}."
            )


def calculate_total(items: Iterable[OrderLine]) -> Decimal:
    """Sum of item subtotals, rounded to cents."""
    return sum((item.subtotal for item in items), Decimal("0")).quantize(CENTS)


def validate_order_total(
    items: Sequence[OrderLine], total_amount: Optional[Decimal]
) -> None:
    """Every subtotal equals quantity × unit price and they add up to the total.

    A ``None`` total skips the last comparison (the service computes it).
    """
    for item in items:
        expected = item.quantity * item.unit_price
        if abs(item.subtotal - expected) > AMOUNT_TOLERANCE:
            raise OrderTotalMismatch(
                f"Incorrect subtotal for product {item.product_name}. "
                f"Expected: {expected:.2f}, informed: {item.subtotal:.2f}."
            )

    if total_amount is None:
        return
    if not _is_cents(total_amount):
        raise OrderTotalMismatch("Order total must have at most 2 decimal places.")
    calculated = calculate_total(items)
    if abs(total_amount - calculated) > AMOUNT_TOLERANCE:
        raise OrderTotalMismatch(
            f"Incorrect order total. Expected: {calculated:.2f}, "
            f"informed: {total_amount:.2f}."
        )


# ---------------------------------------------------------------------------
# Business
# ---------------------------------------------------------------------------


def validate_minimum_order_value(total_amount: Decimal) -> None:
    if total_amount < MIN_ORDER_VALUE:
        raise MinimumOrderValueNotReached(
            f"The minimum order value is {MIN_ORDER_VALUE:.2f}. "
            f"Current value: {total_amount:.2f}."
        )


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


def validate_stock_availability(
    items: Iterable[OrderLine], products: Mapping[UUID, Product]
) -> None:
    """Pre-check stock for every item before anything is written."""
    for item in items:
        product = products[item.product_id]
        if product.stock < item.quantity:
            raise InsufficientStock(product.name, product.stock, item.quantity)
