"""Stock reservation coordinator.

A reservation is a stock decrement tied to the existence of an order
item; a release is its inverse.  The coordinator does not record which
order holds a reservation: the order service pairs every reserve with
exactly one release (item replacement or order deletion).

``reserve`` delegates the availability check to the ledger's atomic
conditional update, so two concurrent reservations against the same
product can never drive its stock below zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Protocol
from uuid import UUID

import structlog

from modules.core.exceptions import DomainError
from modules.products.exceptions import (
    InsufficientStock,
    InvalidProductData,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class StockLine(Protocol):
    """Anything carrying a product reference and a quantity."""

    product_id: UUID
    quantity: int


class StockReservationService:
    """Reserve and release product stock on behalf of order items."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    def reserve(self, product_id: UUID, quantity: int) -> None:
        """Take *quantity* units of the product out of stock.

        Raises:
            InsufficientStock: stock is lower than *quantity*; stock unchanged.
            ProductNotFound: the product does not exist.
        """
        _ensure_positive(quantity)
        log = logger.bind(product_id=str(product_id), quantity=quantity)

        if self._product_repo.decrease_stock(product_id, quantity):
            log.info("stock.reserved")
            return

        product = self._product_repo.get_by_id(str(product_id))
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found.")

        log.warning("stock.reservation_rejected", available=product.stock)
        raise InsufficientStock(product.name, product.stock, quantity)

    def release(self, product_id: UUID, quantity: int) -> None:
        """Put *quantity* units back into stock (capped at the maximum).

        Raises:
            ProductNotFound: the product does not exist.
        """
        _ensure_positive(quantity)
        if not self._product_repo.increase_stock(product_id, quantity):
            raise ProductNotFound(f"Product {product_id} not found.")
        logger.info("stock.released", product_id=str(product_id), quantity=quantity)

    def reserve_many(self, lines: Iterable[StockLine]) -> None:
        """Reserve every line, or none of them.

        Lines are processed in product-id order so concurrent callers lock
        rows in the same sequence.  When a line fails, the lines already
        reserved are released before the error propagates.
        """
        reserved: List[StockLine] = []
        try:
            for line in sorted(lines, key=lambda line: str(line.product_id)):
                self.reserve(line.product_id, line.quantity)
                reserved.append(line)
        except DomainError:
            if reserved:
                logger.warning("stock.reservation_compensated", lines=len(reserved))
                self.release_many(reserved)
            raise

    def release_many(self, lines: Iterable[StockLine]) -> None:
        for line in sorted(lines, key=lambda line: str(line.product_id)):
            self.release(line.product_id, line.quantity)


def _ensure_positive(quantity: int) -> None:
    if quantity < 1:
        raise InvalidProductData(
            f"Stock quantity to reserve or release must be positive, got {quantity}."
        )
