"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes join
the transaction opened by the Service Layer; ``get_for_update`` takes a
``SELECT ... FOR UPDATE`` lock so two commands on the same order run one
after the other.

Domain events drained from the aggregate are handed to the event bus
through ``transaction.on_commit``: a rolled-back command publishes
nothing.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.bus import IEventBus
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus as default_event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def __init__(self, event_bus: Optional[IEventBus] = None) -> None:
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            order_number=data["order_number"],
            order_date=data["order_date"],
            customer_id=data["customer_id"],
            enterprise_id=data["enterprise_id"],
            total_amount=data["total_amount"],
            notes=data.get("notes") or "",
        )
        with transaction.atomic():
            order.save(force_insert=True)
        return order

    def add_items(self, order: Order, items: Iterable[Dict[str, Any]]) -> List[OrderItem]:
        rows = [
            OrderItem(
                order=order,
                product_id=item["product_id"],
                product_name=item["product_name"],
                quantity=item["quantity"],
                unit_price=item["unit_price"],
                subtotal=item["subtotal"],
            )
            for item in items
        ]
        created = OrderItem.objects.bulk_create(rows)
        logger.debug("order.items_added", order_id=str(order.id), item_count=len(created))
        return created

    def delete_items(self, order: Order) -> int:
        deleted, _ = OrderItem.objects.filter(order_id=order.id).delete()
        return deleted

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer and enterprise FKs and
        ``prefetch_related`` for items (with their product).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked (``of=("self",)``); customers and
        enterprises stay readable by concurrent commands.
        """
        try:
            return (
                self._queryset()
                .select_for_update(of=("self",))
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Examples of valid filters::

            {"status": OrderStatus.PENDING}
            {"customer_id": customer.id}
            {"order_date__range": (start, end)}
        """
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def order_number_exists(
        self, order_number: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        queryset = Order.objects.filter(order_number=order_number)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        """Persist an order and schedule its pending events."""
        entity.save()
        events = entity.pull_domain_events()
        self._publish_on_commit(events)
        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    def remove(self, order: Order) -> None:
        events = order.pull_domain_events()
        order_id = order.id
        order.delete()
        self._publish_on_commit(events)
        logger.info("order.removed", order_id=str(order_id))

    def delete(self, id: str) -> bool:
        """Delete an order by ID (items cascade)."""
        order = self.get_by_id(id)
        if not order:
            return False
        self.remove(order)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _queryset():
        return Order.objects.select_related("customer", "enterprise").prefetch_related(
            "items__product"
        )

    def _publish_on_commit(self, events: List[DomainEvent]) -> None:
        for event in events:
            transaction.on_commit(lambda event=event: self._event_bus.publish(event))
