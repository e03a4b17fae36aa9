"""Order and OrderItem models.

Business rules implemented:
- Order number is unique system-wide (unique index is the source of truth).
- Status follows the state machine in ``constants.VALID_TRANSITIONS``;
  terminal orders are read-only (enforced at service layer).
- Customer and Enterprise FKs use PROTECT to preserve order history.
- An order owns its items: deleting the order cascades to them.
- OrderItem snapshots product name and unit price at the time the item
  was validated; a product appears at most once per order.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    MAX_ITEM_QUANTITY,
    MIN_ITEM_QUANTITY,
    ORDER_NUMBER_MAX_LENGTH,
    PRODUCT_NAME_MAX_LENGTH,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``total_amount`` always equals the sum of the item subtotals; the
    service layer validates or computes it before every write.
    """

    order_number = models.CharField(max_length=ORDER_NUMBER_MAX_LENGTH, unique=True)
    order_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    enterprise = models.ForeignKey(
        "enterprises.Enterprise",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``product_name`` and ``unit_price`` are **snapshots** taken when the
    item was validated; they never change if the product is edited later.
    ``subtotal`` is ``quantity * unit_price`` within one cent.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=PRODUCT_NAME_MAX_LENGTH)
    quantity = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(MIN_ITEM_QUANTITY),
            MaxValueValidator(MAX_ITEM_QUANTITY),
        ],
    )
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"],
                name="order_items_order_product_uniq",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=MIN_ITEM_QUANTITY)
                & models.Q(quantity__lte=MAX_ITEM_QUANTITY),
                name="order_items_quantity_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} (${self.subtotal})"
