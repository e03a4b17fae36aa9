"""Order service layer (Use Cases).

Orchestrates the order lifecycle: creation, hydrated reads, field and
item updates, status changes and deletion.  Every command runs in one
``transaction.atomic`` block spanning order, item and stock writes; the
service defines the unit-of-work boundary.

Business rules enforced:
- Orders are validated by ``modules.orders.validators`` before any write.
- Every item added to an order reserves its stock exactly once; every
  item removed (item replacement or order deletion) releases it exactly
  once.  Status changes never touch stock.
- Terminal orders (COMPLETED / CANCELLED) cannot be changed; COMPLETED
  orders cannot be deleted.
- Every mutation locks the order row first, so commands on the same
  order never interleave.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.customers.exceptions import CustomerNotFound
from modules.enterprises.exceptions import EnterpriseNotFound
from modules.orders import state_machine, validators
from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
    OrderUpdated,
)
from modules.orders.exceptions import (
    DuplicateOrderNumber,
    InvalidStatusTransition,
    OrderNotFound,
)
from modules.products.reservations import StockReservationService

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.enterprises.repositories.interfaces import IEnterpriseRepository
    from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  The stock
    reservation coordinator defaults to one built on the product
    repository.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        enterprise_repository: IEnterpriseRepository,
        product_repository: IProductRepository,
        reservation_service: Optional[StockReservationService] = None,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._enterprise_repo = enterprise_repository
        self._product_repo = product_repository
        self._reservations = reservation_service or StockReservationService(
            product_repository
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Validate, persist and reserve stock for a new order.

        Steps:
        1. Referential: customer, enterprise and products exist; every
           product belongs to the enterprise.
        2. Shape: order number, order date, item list.
        3. Consistency: snapshots, subtotals, total (computed when absent).
        4. Business: minimum order value.
        5. Availability: stock pre-check for every item.
        6. Persist order + items, then reserve stock for every item.

        The new order always starts as PENDING.

        Raises:
            CustomerNotFound / EnterpriseNotFound / ProductNotFound.
            ValidationError subclasses: any pipeline violation.
            InsufficientStock: stock ran out before the reservation.
            DuplicateOrderNumber: the order number is already taken.
        """
        log = logger.bind(
            order_number=dto.order_number,
            customer_id=str(dto.customer_id),
            enterprise_id=str(dto.enterprise_id),
        )
        log.info("order.creation_started", item_count=len(dto.items))

        self._require_customer(dto.customer_id)
        self._require_enterprise(dto.enterprise_id)
        products = self._load_products(dto.items)
        validators.validate_enterprise_ownership(products.values(), dto.enterprise_id)

        validators.validate_order_number(dto.order_number)
        validators.validate_order_date(dto.order_date)
        validators.validate_items(dto.items)

        validators.validate_item_snapshots(dto.items, products)
        validators.validate_order_total(dto.items, dto.total_amount)
        total = validators.calculate_total(dto.items)

        validators.validate_minimum_order_value(total)
        validators.validate_stock_availability(dto.items, products)

        if self._order_repo.order_number_exists(dto.order_number):
            raise DuplicateOrderNumber(
                f"Order number {dto.order_number} is already in use."
            )

        order = self._insert_order(dto, total)
        self._order_repo.add_items(order, _item_rows(dto.items))
        self._reservations.reserve_many(dto.items)

        order.add_domain_event(
            OrderCreated(aggregate_id=order.id, order_number=order.order_number)
        )
        self._order_repo.save(order)

        log.info("order.created", order_id=str(order.id), total_amount=str(total))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: UUID, dto: UpdateOrderDTO) -> Order:
        """Apply a partial update; supplying ``items`` replaces the whole set.

        Field-only updates never touch stock.  Item replacement releases
        the current items, removes them, checks availability for the new
        set against the restored stock, inserts it and reserves it.

        Raises:
            OrderNotFound: order does not exist.
            OrderLocked: the order is COMPLETED or CANCELLED.
            DuplicateOrderNumber: the new order number is taken.
            CustomerNotFound / EnterpriseNotFound / ProductNotFound.
            ValidationError subclasses: any pipeline violation.
        """
        order = self._lock(order_id)
        state_machine.assert_mutable(order)

        log = logger.bind(order_id=str(order.id), order_number=order.order_number)
        log.info("order.update_started")

        if dto.order_number is not None and dto.order_number != order.order_number:
            validators.validate_order_number(dto.order_number)
            if self._order_repo.order_number_exists(dto.order_number, exclude_id=order.id):
                raise DuplicateOrderNumber(
                    f"Order number {dto.order_number} is already in use."
                )
            order.order_number = dto.order_number

        if dto.order_date is not None:
            validators.validate_order_date(dto.order_date)
            order.order_date = dto.order_date

        if dto.customer_id is not None and dto.customer_id != order.customer_id:
            self._require_customer(dto.customer_id)
            order.customer_id = dto.customer_id

        enterprise_changed = (
            dto.enterprise_id is not None and dto.enterprise_id != order.enterprise_id
        )
        if enterprise_changed:
            self._require_enterprise(dto.enterprise_id)
            order.enterprise_id = dto.enterprise_id

        if dto.items is not None:
            order.total_amount = self._replace_items(order, dto.items, dto.total_amount)
        else:
            current_items = list(order.items.all())
            if enterprise_changed:
                validators.validate_enterprise_ownership(
                    [item.product for item in current_items], order.enterprise_id
                )
            if dto.total_amount is not None:
                validators.validate_order_total(current_items, dto.total_amount)
                total = validators.calculate_total(current_items)
                validators.validate_minimum_order_value(total)
                order.total_amount = total

        if dto.notes is not None:
            order.notes = dto.notes

        order.add_domain_event(
            OrderUpdated(aggregate_id=order.id, items_replaced=dto.items is not None)
        )
        self._order_repo.save(order)

        log.info("order.updated", items_replaced=dto.items is not None)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(self, order_id: UUID, new_status: str) -> Order:
        """Move an order along the state machine.

        Acquires a row-level lock before validating the transition.
        Cancelling does not release stock; deleting the cancelled order does.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: *new_status* names no known status.
            InvalidStatusTransition: the transition is not allowed,
                including any transition out of a terminal status.
        """
        order = self._lock(order_id)
        target = state_machine.parse_status(new_status)

        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=target.value,
        )

        try:
            state_machine.assert_transition(order.status, target)
        except InvalidStatusTransition:
            log.warning("order.invalid_transition")
            raise

        old_status = order.status
        order.status = target
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=target.value,
            )
        )
        self._order_repo.save(order)

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: UUID) -> None:
        """Release the stock of every item, then remove items and order.

        Raises:
            OrderNotFound: order does not exist.
            OrderDeletionNotAllowed: the order is COMPLETED.
        """
        order = self._lock(order_id)
        state_machine.assert_deletable(order)

        log = logger.bind(order_id=str(order.id), order_number=order.order_number)

        items = list(order.items.all())
        self._reservations.release_many(items)
        self._order_repo.delete_items(order)

        order.add_domain_event(
            OrderDeleted(aggregate_id=order.id, order_number=order.order_number)
        )
        self._order_repo.remove(order)

        log.info("order.deleted", released_items=len(items))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def list_orders_by_customer(self, customer_id: UUID) -> List[Order]:
        self._require_customer(customer_id)
        return self._order_repo.list({"customer_id": customer_id})

    def list_orders_by_enterprise(self, enterprise_id: UUID) -> List[Order]:
        self._require_enterprise(enterprise_id)
        return self._order_repo.list({"enterprise_id": enterprise_id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, order_id: UUID) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _require_customer(self, customer_id: UUID) -> None:
        if not self._customer_repo.get_by_id(str(customer_id)):
            raise CustomerNotFound(f"Customer {customer_id} not found.")

    def _require_enterprise(self, enterprise_id: UUID) -> None:
        if not self._enterprise_repo.get_by_id(str(enterprise_id)):
            raise EnterpriseNotFound(f"Enterprise {enterprise_id} not found.")

    def _load_products(
        self, items: Sequence[CreateOrderItemDTO]
    ) -> Dict[UUID, Product]:
        products = self._product_repo.get_many(item.product_id for item in items)
        validators.ensure_products_found(items, products)
        return products

    def _insert_order(self, dto: CreateOrderDTO, total: Decimal) -> Order:
        """Insert the order row; a unique-index race becomes a domain error."""
        try:
            return self._order_repo.create(
                {
                    "order_number": dto.order_number,
                    "order_date": dto.order_date,
                    "customer_id": dto.customer_id,
                    "enterprise_id": dto.enterprise_id,
                    "total_amount": total,
                    "notes": dto.notes or "",
                }
            )
        except IntegrityError:
            if self._order_repo.order_number_exists(dto.order_number):
                raise DuplicateOrderNumber(
                    f"Order number {dto.order_number} is already in use."
                )
            raise

    def _replace_items(
        self,
        order: Order,
        items: Sequence[CreateOrderItemDTO],
        total_amount: Optional[Decimal],
    ) -> Decimal:
        """Swap the order's item set and return the new total."""
        validators.validate_items(items)
        products = self._load_products(items)
        validators.validate_enterprise_ownership(products.values(), order.enterprise_id)
        validators.validate_item_snapshots(items, products)
        validators.validate_order_total(items, total_amount)
        total = validators.calculate_total(items)
        validators.validate_minimum_order_value(total)

        current_items = list(order.items.all())
        self._reservations.release_many(current_items)
        self._order_repo.delete_items(order)

        # Stock was just restored; re-read it before the availability check.
        products = self._load_products(items)
        validators.validate_stock_availability(items, products)

        self._order_repo.add_items(order, _item_rows(items))
        self._reservations.reserve_many(items)

        logger.info(
            "order.items_replaced",
            order_id=str(order.id),
            released=len(current_items),
            reserved=len(items),
        )
        return total


def _item_rows(items: Sequence[CreateOrderItemDTO]) -> List[Dict[str, Any]]:
    return [
        {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "subtotal": item.subtotal,
        }
        for item in items
    ]
