"""Order repository interface.

Extends ``IRepository[Order]`` with the operations the Order aggregate
needs: creation, locked reads, item replacement and order-number
uniqueness checks.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its ``OrderItem`` children.  Mutations run in
    the caller's transaction; events collected on the order are published
    only after that transaction commits.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order row (without items).

        ``data`` holds ``order_number``, ``order_date``, ``customer_id``,
        ``enterprise_id``, ``total_amount`` and optionally ``notes``.
        Raises ``IntegrityError`` on a duplicate order number.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def order_number_exists(
        self, order_number: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        """Whether another order already uses *order_number*."""

    @abstractmethod
    def add_items(self, order: Order, items: Iterable[Dict[str, Any]]) -> List[OrderItem]:
        """Attach item rows to *order*.

        Each dict holds ``product_id``, ``product_name``, ``quantity``,
        ``unit_price`` and ``subtotal``.
        """

    @abstractmethod
    def delete_items(self, order: Order) -> int:
        """Remove every item of *order*; return how many were removed."""

    @abstractmethod
    def remove(self, order: Order) -> None:
        """Delete *order* (and its items) and publish its pending events."""
