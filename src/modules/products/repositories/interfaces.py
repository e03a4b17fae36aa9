"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups needed for
per-enterprise name uniqueness and with the inventory ledger: two
atomic stock mutations that never let stock leave its allowed range.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Return the existing products among *ids*, keyed by ID."""

    @abstractmethod
    def get_by_name(self, enterprise_id: UUID, name: str) -> Optional[Product]:
        """Retrieve a product by name within one enterprise."""

    @abstractmethod
    def decrease_stock(self, id: UUID, quantity: int) -> bool:
        """Atomically subtract *quantity* if at least that much is in stock.

        Returns ``False`` (and leaves stock untouched) when the product is
        missing or its stock is lower than *quantity*.
        """

    @abstractmethod
    def increase_stock(self, id: UUID, quantity: int) -> bool:
        """Atomically add *quantity*, capped at the maximum stock.

        Returns ``False`` when the product does not exist.
        """
